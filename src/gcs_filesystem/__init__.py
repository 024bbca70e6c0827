"""Google Cloud Storage bucket exposed as a file system with emulated directories."""

from .exceptions import DirectoryNotEmptyError, StorageError, StorageIOError
from .factory import create_file_system, create_file_system_from_env
from .file_system import FileSystem
from .info import DirectoryInfo, FileHash, FileInfo, LinkInfo, ObjectRecord
from .links import DirectoryLink, FileLink, Link
from .lookup import LookupResult, LookupStatus
from .operations import GoogleFileSystemOperations
from .options import LinkMetadata, ListingOptions, MetadataSupport

__all__ = [
    "FileSystem",
    "GoogleFileSystemOperations",
    "create_file_system",
    "create_file_system_from_env",
    "Link",
    "FileLink",
    "DirectoryLink",
    "ObjectRecord",
    "FileHash",
    "FileInfo",
    "DirectoryInfo",
    "LinkInfo",
    "LookupResult",
    "LookupStatus",
    "ListingOptions",
    "LinkMetadata",
    "MetadataSupport",
    "StorageError",
    "StorageIOError",
    "DirectoryNotEmptyError",
]
