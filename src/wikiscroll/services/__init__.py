"""Upstream access and caching services for the WikiScroll edge service."""
from .upstream_client import UpstreamClient, create_http_client
from .metadata_fetcher import MetadataFetcher
from .batch_fetcher import (
    RandomBatchFetcher,
    EncyclopediaBatchFetcher,
    TravelGuideBatchFetcher,
    build_batch_fetchers,
    is_language_code,
)
from .edge_cache import EdgeCache, detach

__all__ = [
    "UpstreamClient",
    "create_http_client",
    "MetadataFetcher",
    "RandomBatchFetcher",
    "EncyclopediaBatchFetcher",
    "TravelGuideBatchFetcher",
    "build_batch_fetchers",
    "is_language_code",
    "EdgeCache",
    "detach",
]
