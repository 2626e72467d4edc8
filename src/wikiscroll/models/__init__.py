from .article import ArticleRecord, ArticleSource, MIN_BODY_LENGTH
from .reference import ArticleReference
from .preview import NormalizedPreview, MAX_DESCRIPTION_LENGTH
from .fetch_result import FetchResult, FetchStatus
from .cache_entry import CacheEntry, CacheKey, CacheLookup, CacheStatus

__all__ = [
    "ArticleRecord",
    "ArticleSource",
    "MIN_BODY_LENGTH",
    "ArticleReference",
    "NormalizedPreview",
    "MAX_DESCRIPTION_LENGTH",
    "FetchResult",
    "FetchStatus",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "CacheStatus",
]
