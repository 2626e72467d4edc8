from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Tuple

from .article import ArticleRecord


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"


@dataclass(frozen=True)
class CacheKey:
    mode: str
    language: str
    count: int


@dataclass(frozen=True)
class CacheEntry:
    """A stored batch. Replaced wholesale on refresh, never mutated."""

    key: CacheKey
    articles: Tuple[ArticleRecord, ...]
    stored_at: datetime

    def is_fresh(self, now: datetime, ttl_seconds: int) -> bool:
        return now - self.stored_at < timedelta(seconds=ttl_seconds)


@dataclass(frozen=True)
class CacheLookup:
    """What the edge cache hands back to the router."""

    articles: Tuple[ArticleRecord, ...]
    status: CacheStatus
    stored_at: datetime
