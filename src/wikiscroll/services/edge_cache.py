"""
Edge cache for validated article batches (cache-aside).

Entries are keyed by the exact ``(mode, language, count)`` triple and live
for ``cache_ttl_seconds``. On a miss the batch is computed, returned at
once, and written back by a detached task, so a slow or failing write never
touches the response. Concurrent misses on one key are not collapsed; each
computes its own batch and the last write wins.
"""

import asyncio
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Set

from ..config import get_settings, get_service_logger
from ..config.settings import Settings
from ..core.exceptions import CacheException, ValidationException
from ..models import CacheEntry, CacheKey, CacheLookup, CacheStatus
from .batch_fetcher import RandomBatchFetcher

Clock = Callable[[], datetime]
Scheduler = Callable[..., Any]

logger = get_service_logger("EdgeCache")

# Strong references to detached write tasks until they finish.
_background_tasks: Set["asyncio.Task[Any]"] = set()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def detach(func: Callable[..., Any], *args: Any) -> None:
    """Default scheduler: run ``func(*args)`` as a fire-and-forget task."""
    task = asyncio.get_running_loop().create_task(func(*args))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


class EdgeCache:
    """In-process edge cache wrapping the random batch fetchers."""

    def __init__(
        self,
        fetchers: Mapping[str, RandomBatchFetcher],
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        ttl_seconds: Optional[int] = None,
        max_entries: Optional[int] = None,
    ):
        settings = settings or get_settings()
        self.fetchers = dict(fetchers)
        self.clock: Clock = clock or utc_now
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache_ttl_seconds
        self.max_entries = max_entries if max_entries is not None else settings.cache_max_entries

        self._entries: "OrderedDict[CacheKey, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._write_failures = 0

    # ------------------------- public -------------------------
    async def get_or_compute(
        self,
        mode: str,
        language: str,
        count: int,
        schedule: Optional[Scheduler] = None,
    ) -> CacheLookup:
        """
        Return the cached batch for the triple, or compute a fresh one.

        Args:
            mode: batch mode, selects the fetcher (``wiki`` / ``how``)
            language: language code
            count: batch size
            schedule: ``schedule(func, *args)`` used to detach the write on a
                miss, e.g. ``BackgroundTasks.add_task``; defaults to an
                asyncio task

        Raises:
            ValidationException: no fetcher is registered for ``mode``
        """
        fetcher = self.fetchers.get(mode)
        if fetcher is None:
            raise ValidationException(f"Unknown batch mode: {mode}", context=mode)

        key = CacheKey(mode=mode, language=language, count=count)
        entry = self.get(key)
        if entry is not None:
            self._hits += 1
            return CacheLookup(entry.articles, CacheStatus.HIT, entry.stored_at)

        self._misses += 1
        articles = tuple(await fetcher.fetch_batch(language, count))
        entry = CacheEntry(key=key, articles=articles, stored_at=self.clock())
        (schedule or detach)(self.store, entry)
        return CacheLookup(entry.articles, CacheStatus.MISS, entry.stored_at)

    async def store(self, entry: CacheEntry) -> None:
        """Background write; failures are logged and go no further."""
        try:
            self.put(entry)
        except Exception as e:
            self._write_failures += 1
            logger.error(
                "Edge cache write failed",
                mode=entry.key.mode,
                language=entry.key.language,
                count=entry.key.count,
                error=str(e),
            )

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        """Fresh entry for ``key``; expired entries are dropped."""
        now = self.clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(now, self.ttl_seconds):
                del self._entries[key]
                return None
            self._entries.move_to_end(key, last=True)
            return entry

    def put(self, entry: CacheEntry) -> None:
        """Store ``entry``, replacing any previous entry for its key."""
        if not isinstance(entry, CacheEntry):
            raise CacheException("Only CacheEntry values can be stored", context=entry)
        with self._lock:
            self._entries[entry.key] = entry
            self._entries.move_to_end(entry.key, last=True)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            size = len(self._entries)
        return {
            "entries": size,
            "hits": self._hits,
            "misses": self._misses,
            "write_failures": self._write_failures,
            "ttl_seconds": self.ttl_seconds,
        }
