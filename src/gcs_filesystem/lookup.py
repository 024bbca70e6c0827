"""Outcome of a link info lookup."""

from dataclasses import dataclass
from enum import Enum

from .info import LinkInfo


class LookupStatus(str, Enum):
    """
    - FOUND: the object exists and ``info`` is set
    - NOT_FOUND: the provider reported that no such object exists
    - TRANSIENT_ERROR: the provider call failed; existence is unknown
    """
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class LookupResult:
    status: LookupStatus
    info: LinkInfo | None = None
    error: Exception | None = None

    @classmethod
    def found(cls, info: LinkInfo) -> "LookupResult":
        return cls(LookupStatus.FOUND, info=info)

    @classmethod
    def not_found(cls) -> "LookupResult":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def transient_error(cls, error: Exception) -> "LookupResult":
        return cls(LookupStatus.TRANSIENT_ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND
