"""Path handles for the emulated directory tree."""

import posixpath
from dataclasses import dataclass

DIRECTORY_SEPARATOR = "/"


def normalize_directory_key(full_name: str | None) -> str:
    """Return ``full_name`` with exactly one trailing separator.

    The bucket root is the empty key and stays empty.
    """
    stripped = (full_name or "").rstrip(DIRECTORY_SEPARATOR)
    return stripped + DIRECTORY_SEPARATOR if stripped else ""


def has_extension(full_name: str) -> bool:
    """Return True if the last path segment has a file-extension-like suffix.

    A leading dot counts (``.env`` has one), a trailing dot does not.
    """
    segment = full_name.rsplit(DIRECTORY_SEPARATOR, 1)[-1]
    dot = segment.rfind(".")
    return 0 <= dot < len(segment) - 1


def normalize_path(path: str) -> str:
    """Convert a caller path into an object key (no leading separator)."""
    return str(path).replace("\\", DIRECTORY_SEPARATOR).lstrip(DIRECTORY_SEPARATOR)


@dataclass(frozen=True)
class Link:
    full_name: str

    @property
    def key(self) -> str:
        return self.full_name

    @property
    def name(self) -> str:
        return posixpath.basename(self.full_name.rstrip(DIRECTORY_SEPARATOR))


@dataclass(frozen=True)
class FileLink(Link):
    """A leaf of the tree; maps to a single object key."""


@dataclass(frozen=True)
class DirectoryLink(Link):
    """An inner node; maps to a marker object under the normalised key."""

    @property
    def key(self) -> str:
        return normalize_directory_key(self.full_name)
