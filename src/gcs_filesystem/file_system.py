"""
FileSystem: path based entry point over a set of file system operations.

Callers work with plain string paths; the handle turns them into links,
delegates to the operations object and adds conveniences such as whole-file
byte reads and writes.
"""

import io
import logging
from typing import BinaryIO

from .info import DirectoryInfo, FileInfo, LinkInfo
from .links import DirectoryLink, FileLink, Link, normalize_path
from .lookup import LookupResult
from .operations import GoogleFileSystemOperations
from .options import LinkMetadata, ListingOptions, MetadataSupport

log = logging.getLogger(__name__)


class FileSystem:
    """A ready-to-use file system handle bound to one bucket."""

    def __init__(self, operations: GoogleFileSystemOperations):
        self._operations = operations

    @property
    def operations(self) -> GoogleFileSystemOperations:
        return self._operations

    @property
    def kind(self) -> str:
        return self._operations.kind

    @property
    def name(self) -> str:
        return self._operations.name

    @property
    def directory_separator(self) -> str:
        return self._operations.directory_separator

    @property
    def metadata_support(self) -> MetadataSupport:
        return self._operations.metadata_support

    # --- lookups ---

    async def lookup_link_info(self, path: str) -> LookupResult:
        return await self._operations.lookup_link_info(normalize_path(path))

    async def get_link_info(self, path: str) -> LinkInfo | None:
        return await self._operations.get_link_info(normalize_path(path))

    async def exists(self, path: str) -> bool:
        return await self.get_link_info(path) is not None

    async def get_file_info(self, path: str) -> FileInfo | None:
        info = await self.get_link_info(path)
        return info if isinstance(info, FileInfo) else None

    async def get_directory_info(self, path: str) -> DirectoryInfo | None:
        info = await self.get_link_info(path)
        return info if isinstance(info, DirectoryInfo) else None

    # --- files ---

    async def read_file(self, path: str, stream: BinaryIO) -> None:
        await self._operations.read_file(FileLink(normalize_path(path)), stream)

    async def read_bytes(self, path: str) -> bytes:
        buffer = io.BytesIO()
        await self.read_file(path, buffer)
        return buffer.getvalue()

    async def write_file(self, path: str, stream: BinaryIO, overwrite: bool = True) -> FileInfo:
        return await self._operations.write_file(FileLink(normalize_path(path)), stream, overwrite)

    async def write_bytes(self, path: str, data: bytes, overwrite: bool = True) -> FileInfo:
        return await self.write_file(path, io.BytesIO(data), overwrite)

    async def move_file(self, source: str, destination: str, overwrite: bool = False) -> FileInfo:
        return await self._operations.move_file(
            FileLink(normalize_path(source)),
            FileLink(normalize_path(destination)),
            overwrite,
        )

    async def delete_file(self, path: str) -> None:
        await self._operations.delete_file(FileLink(normalize_path(path)))

    # --- directories ---

    async def create_directory(self, path: str) -> DirectoryInfo:
        return await self._operations.create_directory(DirectoryLink(normalize_path(path)))

    async def move_directory(self, source: str, destination: str) -> DirectoryInfo:
        return await self._operations.move_directory(
            DirectoryLink(normalize_path(source)),
            DirectoryLink(normalize_path(destination)),
        )

    async def delete_directory(self, path: str, recursive: bool = False) -> None:
        await self._operations.delete_directory(DirectoryLink(normalize_path(path)), recursive)

    async def list_links(
        self,
        path: str = "",
        recursive: bool = False,
        search_for_directories: bool = True,
    ) -> list[LinkInfo]:
        """List the links under ``path``.

        When the operations object does not report ``recursive_handled`` for
        a recursive listing, subdirectories are walked here one level at a
        time.
        """
        if not recursive:
            options = ListingOptions(search_for_directories=search_for_directories)
            return await self._operations.get_links(DirectoryLink(normalize_path(path)), options)

        # Directories are needed to descend; they are filtered out at the end.
        options = ListingOptions(recursive=True, search_for_directories=True)
        result = await self._operations.get_links(DirectoryLink(normalize_path(path)), options)
        if not options.recursive_handled:
            log.debug("Walking %s on the client side", path)
            pending = list(result)
            result = []
            while pending:
                info = pending.pop(0)
                result.append(info)
                if info.is_directory:
                    level = ListingOptions(search_for_directories=True)
                    pending.extend(await self._operations.get_links(DirectoryLink(info.full_name), level))
        if not search_for_directories:
            result = [info for info in result if not info.is_directory]
        return result

    # --- metadata ---

    async def update_metadata(self, path: str, metadata: LinkMetadata) -> LinkInfo | None:
        key = normalize_path(path)
        info = await self.get_link_info(key)
        link: Link = DirectoryLink(key) if isinstance(info, DirectoryInfo) else FileLink(key)
        return await self._operations.update_metadata(link, metadata)

    # --- lifecycle ---

    def close(self) -> None:
        self._operations.close()

    async def __aenter__(self) -> "FileSystem":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()
