"""Listing options and metadata types shared by the adapter and the file system."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ListingOptions:
    """Options for enumerating a directory.

    ``recursive_handled`` is set by an adapter that already performed the
    recursive enumeration, so the caller does not walk subdirectories again.
    """

    recursive: bool = False
    search_for_directories: bool = True
    recursive_handled: bool = False


@dataclass(frozen=True)
class LinkMetadata:
    is_hidden: bool | None = None
    is_read_only: bool | None = None
    last_write_time: datetime | None = None


@dataclass(frozen=True)
class MetadataSupport:
    """Which ``LinkMetadata`` fields a backend can persist."""

    supports_is_hidden: bool = False
    supports_is_read_only: bool = False
    supports_last_write_time: bool = False
