"""
Directory emulation over a flat Google Cloud Storage bucket.

Files are plain objects. A directory exists when a zero-length marker object
with the ``application/x-directory`` content type is stored under the
directory key (the path with one trailing separator). Listings use prefix and
delimiter queries, so subdirectories show up as common prefixes.

The storage SDK is synchronous; every provider call is pushed to a worker
thread with ``asyncio.to_thread``.
"""

import asyncio
import logging
import threading
from typing import Any, BinaryIO, Callable

from google.api_core.exceptions import GoogleAPICallError, NotFound
from google.cloud import storage as gcs

from .exceptions import DirectoryNotEmptyError, StorageIOError
from .info import (
    DIRECTORY_CONTENT_TYPE,
    FILE_CONTENT_TYPE,
    DirectoryInfo,
    FileInfo,
    LinkInfo,
    ObjectRecord,
    classify,
)
from .links import (
    DIRECTORY_SEPARATOR,
    DirectoryLink,
    FileLink,
    Link,
    has_extension,
    normalize_directory_key,
)
from .lookup import LookupResult, LookupStatus
from .options import LinkMetadata, ListingOptions, MetadataSupport

log = logging.getLogger(__name__)

DEFAULT_LIST_PAGE_SIZE = 100
EMPTY_CHECK_PAGE_SIZE = 2


class GoogleFileSystemOperations:
    """File system operations backed by a single GCS bucket."""

    kind = "google"
    directory_separator = DIRECTORY_SEPARATOR
    metadata_support = MetadataSupport()

    def __init__(
        self,
        bucket_name: str,
        credentials: Any = None,
        project: str | None = None,
        client_factory: Callable[[], gcs.Client] | None = None,
        list_page_size: int = DEFAULT_LIST_PAGE_SIZE,
    ):
        if not bucket_name:
            raise ValueError("bucket_name cannot be empty")
        if credentials is None and client_factory is None:
            raise ValueError("credentials cannot be None")
        if list_page_size < 1:
            raise ValueError(f"list_page_size must be >= 1, got: {list_page_size}")

        self._bucket_name = bucket_name
        self._credentials = credentials
        self._project = project
        self._client_factory = client_factory
        self._list_page_size = list_page_size

        self._client: gcs.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._bucket_name

    # --- client lifecycle ---

    def _create_client(self) -> gcs.Client:
        if self._client_factory is not None:
            return self._client_factory()
        return gcs.Client(project=self._project, credentials=self._credentials)

    def _get_client(self) -> gcs.Client:
        client = self._client
        if client is not None:
            return client
        with self._client_lock:
            if self._client is None:
                self._client = self._create_client()
                log.info("Storage client created for bucket %s", self._bucket_name)
            return self._client

    def _bucket(self):
        return self._get_client().bucket(self._bucket_name)

    def close(self) -> None:
        with self._client_lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
            log.info("Storage client closed for bucket %s", self._bucket_name)

    def __enter__(self) -> "GoogleFileSystemOperations":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- lookups ---

    def _fetch_record(self, key: str) -> ObjectRecord | None:
        blob = self._bucket().get_blob(key)
        if blob is None:
            return None
        return ObjectRecord.from_blob(blob)

    async def _lookup(self, key: str) -> LookupResult:
        if key == "":
            return LookupResult.found(DirectoryInfo.from_prefix(key))
        try:
            record = await asyncio.to_thread(self._fetch_record, key)
        except NotFound:
            record = None
        except Exception as e:
            log.warning("Lookup of %s in bucket %s failed: %s", key, self._bucket_name, e)
            return LookupResult.transient_error(e)
        if record is None:
            return LookupResult.not_found()
        return LookupResult.found(classify(record))

    async def lookup_link_info(self, full_name: str) -> LookupResult:
        """Look up ``full_name`` as stored, then once more as a directory key.

        The second attempt is skipped when the name has a file extension,
        since such a name is taken to be a file.
        """
        result = await self._lookup(full_name)
        if result.is_found or has_extension(full_name):
            return result

        directory_key = normalize_directory_key(full_name)
        if directory_key == full_name:
            return result

        log.debug("Retrying lookup of %s as directory %s", full_name, directory_key)
        fallback = await self._lookup(directory_key)
        if fallback.is_found:
            return fallback
        if result.status is LookupStatus.TRANSIENT_ERROR:
            return result
        return fallback

    async def get_link_info(self, full_name: str) -> LinkInfo | None:
        return (await self.lookup_link_info(full_name)).info

    # --- files ---

    async def read_file(self, file: FileLink, stream: BinaryIO) -> None:
        def _download():
            self._bucket().blob(file.key).download_to_file(stream)

        log.debug("Reading %s from bucket %s", file.key, self._bucket_name)
        await asyncio.to_thread(_download)

    async def write_file(self, file: FileLink, stream: BinaryIO, overwrite: bool) -> FileInfo:
        # The upload always replaces the object; overwrite=False is not enforced.
        if not overwrite:
            log.debug("overwrite=False is not enforced for %s", file.key)

        def _upload() -> ObjectRecord:
            blob = self._bucket().blob(file.key)
            blob.upload_from_file(stream, content_type=FILE_CONTENT_TYPE)
            return ObjectRecord.from_blob(blob)

        record = await asyncio.to_thread(_upload)
        log.debug("Wrote %s (%d bytes) to bucket %s", file.key, record.size, self._bucket_name)
        return FileInfo.from_record(record)

    def _delete_object(self, key: str) -> None:
        self._bucket().delete_blob(key)

    def _copy_then_delete(self, source_key: str, destination_key: str) -> ObjectRecord:
        bucket = self._bucket()
        if source_key == destination_key:
            # A move onto itself leaves the object in place.
            blob = bucket.get_blob(source_key)
            if blob is None:
                raise NotFound(f"No such object: {source_key}")
            return ObjectRecord.from_blob(blob)
        copied = bucket.copy_blob(bucket.blob(source_key), bucket, new_name=destination_key)
        bucket.delete_blob(source_key)
        return ObjectRecord.from_blob(copied)

    async def move_file(self, source: FileLink, destination: FileLink, overwrite: bool) -> FileInfo:
        log.debug("Moving %s to %s in bucket %s", source.key, destination.key, self._bucket_name)
        record = await asyncio.to_thread(self._copy_then_delete, source.key, destination.key)
        return FileInfo.from_record(record)

    async def delete_file(self, file: FileLink) -> None:
        try:
            await asyncio.to_thread(self._delete_object, file.key)
        except GoogleAPICallError as e:
            raise StorageIOError(e.message, key=file.key, cause=e) from e
        log.debug("Deleted %s from bucket %s", file.key, self._bucket_name)

    # --- directories ---

    async def create_directory(self, directory: DirectoryLink) -> DirectoryInfo:
        def _create_marker() -> ObjectRecord:
            blob = self._bucket().blob(directory.key)
            blob.upload_from_string(b"", content_type=DIRECTORY_CONTENT_TYPE)
            return ObjectRecord.from_blob(blob)

        record = await asyncio.to_thread(_create_marker)
        log.debug("Created directory marker %s in bucket %s", directory.key, self._bucket_name)
        return DirectoryInfo.from_record(record)

    async def move_directory(self, source: DirectoryLink, destination: DirectoryLink) -> DirectoryInfo:
        # Only the marker is relocated; objects under the source prefix stay put.
        log.debug("Moving directory marker %s to %s", source.key, destination.key)
        record = await asyncio.to_thread(self._copy_then_delete, source.key, destination.key)
        return DirectoryInfo.from_record(record)

    def _has_children(self, directory_key: str) -> bool:
        iterator = self._get_client().list_blobs(
            self._bucket_name,
            prefix=directory_key,
            delimiter=DIRECTORY_SEPARATOR,
            include_trailing_delimiter=True,
            page_size=EMPTY_CHECK_PAGE_SIZE,
        )
        page = next(iterator.pages)
        if any(blob.name != directory_key for blob in page):
            return True
        return any(prefix != directory_key for prefix in page.prefixes)

    async def delete_directory(self, directory: DirectoryLink, recursive: bool) -> None:
        """Delete the directory marker.

        Without ``recursive`` the directory must not contain anything besides
        its own marker. With ``recursive`` only the marker is removed; objects
        below the prefix are left for the caller to delete.
        """
        key = directory.key
        if not recursive and await asyncio.to_thread(self._has_children, key):
            raise DirectoryNotEmptyError(key=key)

        await asyncio.to_thread(self._delete_object, key)
        log.debug("Deleted directory marker %s from bucket %s", key, self._bucket_name)

    # --- listing ---

    def _list_page(
        self,
        prefix: str,
        delimiter: str | None,
        include_trailing_delimiter: bool,
        page_token: str | None,
    ) -> tuple[list[ObjectRecord], tuple[str, ...], str | None]:
        iterator = self._get_client().list_blobs(
            self._bucket_name,
            prefix=prefix,
            delimiter=delimiter,
            include_trailing_delimiter=include_trailing_delimiter,
            page_token=page_token,
            page_size=self._list_page_size,
        )
        page = next(iterator.pages)
        records = [ObjectRecord.from_blob(blob) for blob in page]
        prefixes = tuple(page.prefixes)
        return records, prefixes, iterator.next_page_token

    async def get_links(self, directory: DirectoryLink, options: ListingOptions) -> list[LinkInfo]:
        key = directory.key
        options.recursive_handled = True

        delimiter = None if options.recursive else DIRECTORY_SEPARATOR
        include_trailing_delimiter = delimiter is not None and options.search_for_directories

        result: list[LinkInfo] = []
        seen: set[str] = set()
        common_prefixes: dict[str, None] = {}
        page_token = None
        pages = 0

        while True:
            records, prefixes, page_token = await asyncio.to_thread(
                self._list_page, key, delimiter, include_trailing_delimiter, page_token
            )
            pages += 1
            for record in records:
                if record.name == key or record.name in seen:
                    continue
                seen.add(record.name)
                result.append(classify(record))
            common_prefixes.update(dict.fromkeys(prefixes))
            if not page_token:
                break

        if options.search_for_directories:
            for prefix in common_prefixes:
                if prefix != key and prefix not in seen:
                    result.append(DirectoryInfo.from_prefix(prefix))

        log.debug("Listed %d links under %r in %d page(s)", len(result), key, pages)
        return result

    # --- metadata ---

    async def update_metadata(self, link: Link, metadata: LinkMetadata) -> LinkInfo | None:
        """Return the current info; none of the ``metadata`` fields is persisted."""
        record = await asyncio.to_thread(self._fetch_record, link.key)
        return classify(record)
