"""
Explicit outcome of a single upstream fetch.

A fetch either succeeded, found that the thing legitimately does not exist,
or could not reach a usable answer (network error, non-2xx status, malformed
payload). Callers that only care about "usable or not" check ``ok``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FetchStatus(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    status: FetchStatus
    value: Optional[T] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(FetchStatus.SUCCESS, value=value)

    @classmethod
    def not_found(cls, reason: Optional[str] = None) -> "FetchResult[T]":
        return cls(FetchStatus.NOT_FOUND, reason=reason)

    @classmethod
    def unavailable(cls, reason: Optional[str] = None) -> "FetchResult[T]":
        return cls(FetchStatus.UNAVAILABLE, reason=reason)
