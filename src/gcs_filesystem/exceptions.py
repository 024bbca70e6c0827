"""Exception hierarchy for the bucket-backed file system."""


class StorageError(Exception):
    """Base exception for all file system operations."""

    def __init__(self, message: str, key: str | None = None, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        super().__init__(message)


class StorageIOError(StorageError, OSError):
    """Raised when the storage backend fails an I/O operation."""


class DirectoryNotEmptyError(StorageIOError):
    """Raised when a non-recursive delete targets a directory with children."""

    def __init__(self, key: str | None = None):
        super().__init__("Folder is not empty.", key=key)
