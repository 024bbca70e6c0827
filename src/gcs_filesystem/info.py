"""
Object records and the link info projections built from them.

An ``ObjectRecord`` is a read-only snapshot of the metadata GCS reports for a
single object. ``classify`` is the only place where a record is turned into
either a ``FileInfo`` or a ``DirectoryInfo``; the rest of the package works
with those two types and never looks at the content type again.
"""

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from .links import DIRECTORY_SEPARATOR

DIRECTORY_CONTENT_TYPE = "application/x-directory"
FILE_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ObjectRecord:
    """Metadata of a stored object as reported by the provider."""

    name: str
    size: int = 0
    content_type: str | None = None
    time_created: datetime | None = None
    updated: datetime | None = None
    md5_hash: str | None = None

    @classmethod
    def from_blob(cls, blob: Any) -> "ObjectRecord":
        return cls(
            name=blob.name,
            size=int(blob.size or 0),
            content_type=blob.content_type,
            time_created=blob.time_created,
            updated=blob.updated,
            md5_hash=blob.md5_hash,
        )

    @property
    def is_directory_marker(self) -> bool:
        return self.content_type == DIRECTORY_CONTENT_TYPE


@dataclass(frozen=True)
class FileHash:
    """Content hash of a file; ``value`` is base64 encoded as GCS returns it."""

    algorithm: str
    value: str | None

    @property
    def hex(self) -> str | None:
        if not self.value:
            return None
        try:
            return base64.b64decode(self.value).hex()
        except (binascii.Error, ValueError):
            return None


@dataclass(frozen=True)
class FileInfo:
    full_name: str
    creation_time: datetime | None = None
    last_write_time: datetime | None = None
    hash: FileHash = field(default_factory=lambda: FileHash("md5", None))
    length: int = 0

    exists = True
    is_directory = False
    is_hidden = False
    is_read_only = False

    @property
    def content_path(self) -> str:
        return self.full_name

    @classmethod
    def from_record(cls, record: ObjectRecord) -> "FileInfo":
        return cls(
            full_name=record.name,
            creation_time=record.time_created,
            last_write_time=record.updated,
            hash=FileHash("md5", record.md5_hash),
            length=record.size,
        )


@dataclass(frozen=True)
class DirectoryInfo:
    full_name: str
    creation_time: datetime | None = None
    last_write_time: datetime | None = None

    exists = True
    is_directory = True
    is_hidden = False
    is_read_only = False

    @classmethod
    def from_record(cls, record: ObjectRecord) -> "DirectoryInfo":
        return cls(
            full_name=record.name.rstrip(DIRECTORY_SEPARATOR),
            creation_time=record.time_created,
            last_write_time=record.updated,
        )

    @classmethod
    def from_prefix(cls, prefix: str) -> "DirectoryInfo":
        """Directory known only from a listing prefix; it has no marker object."""
        return cls(full_name=prefix.rstrip(DIRECTORY_SEPARATOR))


LinkInfo = Union[FileInfo, DirectoryInfo]


def classify(record: ObjectRecord | None) -> LinkInfo | None:
    """Map a record to ``DirectoryInfo`` if it is a marker, otherwise ``FileInfo``."""
    if record is None:
        return None
    if record.is_directory_marker:
        return DirectoryInfo.from_record(record)
    return FileInfo.from_record(record)
