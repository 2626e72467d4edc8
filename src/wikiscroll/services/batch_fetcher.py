"""
Random article batches for the feed.

A large share of random pages have no thumbnail, a stub-length extract, or
are administrative pages, so each fetcher oversamples: it asks upstream for
``ceil(count * oversample)`` candidates concurrently, waits for every request
to settle, filters, and truncates to ``count``. Failed requests simply
contribute no candidates. A batch may come back short.
"""

import asyncio
import math
import re
from typing import Any, Awaitable, Dict, Iterable, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from ..config import get_settings, get_service_logger
from ..config.settings import Settings
from ..models import ArticleRecord, ArticleSource, FetchResult
from ..processing.cleaner import strip_html, is_valid_candidate
from .upstream_client import UpstreamClient

LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,12}(?:-[a-z0-9]{1,8})*$")


def is_language_code(value: Optional[str]) -> bool:
    """True for Wikimedia language subdomains such as ``en``, ``simple`` or ``zh-yue``."""
    return bool(value) and LANGUAGE_CODE_RE.match(value) is not None


class RandomBatchFetcher:
    """Shared oversample, gather, filter and truncate flow."""

    source: ArticleSource

    def __init__(self, client: UpstreamClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()
        self.logger = get_service_logger(self.__class__.__name__)

    @property
    def oversample(self) -> float:
        raise NotImplementedError

    def candidate_count(self, count: int) -> int:
        return max(0, min(math.ceil(count * self.oversample), self.settings.max_fanout))

    async def fetch_batch(self, language: str, count: int) -> List[ArticleRecord]:
        """
        Fetch up to ``count`` validated articles.

        Args:
            language: requested language edition
            count: wanted batch size

        Returns:
            Validated records in the order candidates were enumerated; may
            be shorter than ``count``.
        """
        if count <= 0:
            return []

        records: List[ArticleRecord] = []
        seen = set()
        requested = 0

        for _ in range(1 + max(0, self.settings.refill_rounds)):
            missing = count - len(records)
            if missing <= 0:
                break
            wanted = self.candidate_count(missing)
            requested += wanted
            for page in await self._fetch_candidates(language, wanted):
                record = self._to_record(page, language)
                if record is None or record.id in seen:
                    continue
                seen.add(record.id)
                records.append(record)
                if len(records) >= count:
                    break

        self.logger.info(
            "Random batch fetched",
            source=self.source.value,
            language=language,
            requested=requested,
            returned=len(records),
            wanted=count,
        )
        return records[:count]

    async def _fetch_candidates(self, language: str, wanted: int) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def _to_record(self, page: Dict[str, Any], language: str) -> Optional[ArticleRecord]:
        raise NotImplementedError

    async def _gather(
        self, requests: Iterable[Awaitable[FetchResult[Any]]]
    ) -> List[FetchResult[Any]]:
        """Run all requests under the concurrency limit and wait for every one."""
        sem = asyncio.Semaphore(max(1, self.settings.upstream_max_concurrency))

        async def _limited(request: Awaitable[FetchResult[Any]]) -> FetchResult[Any]:
            async with sem:
                return await request

        return await asyncio.gather(*(_limited(r) for r in requests))

    def _build_record(
        self,
        page_id: Any,
        title: Any,
        extract: Any,
        thumbnail: Any,
        url: str,
    ) -> Optional[ArticleRecord]:
        if page_id is None or not isinstance(title, str):
            return None
        body = strip_html(extract if isinstance(extract, str) else "")
        image = thumbnail.get("source") if isinstance(thumbnail, dict) else None
        if not is_valid_candidate(title, body, image):
            return None
        try:
            return ArticleRecord(
                id=f"{self.source.prefix}{page_id}",
                source=self.source,
                title=title,
                body=body,
                image=image,
                url=url,
            )
        except ValidationError:
            return None


class EncyclopediaBatchFetcher(RandomBatchFetcher):
    """Random Wikipedia articles via the REST ``page/random/summary`` endpoint."""

    source = ArticleSource.ENCYCLOPEDIA

    @property
    def oversample(self) -> float:
        return self.settings.encyclopedia_oversample

    def base_url(self, language: str) -> str:
        if not is_language_code(language):
            language = "en"
        return f"https://{language}.{self.settings.encyclopedia_host}"

    async def _fetch_candidates(self, language: str, wanted: int) -> List[Dict[str, Any]]:
        url = f"{self.base_url(language)}/api/rest_v1/page/random/summary"
        results = await self._gather(self.client.get_json(url) for _ in range(wanted))
        return [r.value for r in results if r.ok and isinstance(r.value, dict)]

    def _to_record(self, page: Dict[str, Any], language: str) -> Optional[ArticleRecord]:
        title = page.get("title")
        desktop = (page.get("content_urls") or {}).get("desktop") or {}
        url = desktop.get("page") if isinstance(desktop, dict) else None
        if not url and isinstance(title, str):
            url = f"{self.base_url(language)}/wiki/{quote(title)}"
        return self._build_record(
            page.get("pageid"), title, page.get("extract"), page.get("thumbnail"), url or "#"
        )


class TravelGuideBatchFetcher(RandomBatchFetcher):
    """
    Random Wikivoyage articles via ``generator=random`` queries.

    Candidates are requested in concurrent chunks of at most
    ``travel_guide_page_size`` pages. The travel guide is always read in
    ``travel_guide_language``; the requested language is ignored.
    """

    source = ArticleSource.TRAVEL_GUIDE

    @property
    def oversample(self) -> float:
        return self.settings.travel_guide_oversample

    @property
    def base_url(self) -> str:
        return f"https://{self.settings.travel_guide_language}.{self.settings.travel_guide_host}"

    def chunk_sizes(self, wanted: int) -> List[int]:
        size = max(1, self.settings.travel_guide_page_size)
        return [min(size, wanted - start) for start in range(0, wanted, size)]

    async def _fetch_candidates(self, language: str, wanted: int) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/w/api.php"
        results = await self._gather(
            self.client.get_json(url, params=self._query_params(limit))
            for limit in self.chunk_sizes(wanted)
        )

        pages: List[Dict[str, Any]] = []
        for result in results:
            if not result.ok or not isinstance(result.value, dict):
                continue
            chunk = (result.value.get("query") or {}).get("pages")
            if isinstance(chunk, dict):
                pages.extend(p for p in chunk.values() if isinstance(p, dict))
        return pages

    @staticmethod
    def _query_params(limit: int) -> Dict[str, str]:
        return {
            "action": "query",
            "generator": "random",
            "grnnamespace": "0",
            "grnlimit": str(limit),
            "prop": "extracts|pageimages|info",
            "exintro": "1",
            "explaintext": "1",
            "piprop": "thumbnail",
            "pithumbsize": "800",
            "inprop": "url",
            "format": "json",
            "origin": "*",
        }

    def _to_record(self, page: Dict[str, Any], language: str) -> Optional[ArticleRecord]:
        title = page.get("title")
        url = page.get("fullurl")
        if not url and isinstance(title, str):
            url = f"{self.base_url}/wiki/{quote(title)}"
        return self._build_record(
            page.get("pageid"), title, page.get("extract"), page.get("thumbnail"), url or "#"
        )


def build_batch_fetchers(
    client: UpstreamClient, settings: Optional[Settings] = None
) -> Dict[str, RandomBatchFetcher]:
    """Fetchers keyed by batch mode (``wiki`` / ``how``)."""
    fetchers = (
        EncyclopediaBatchFetcher(client, settings),
        TravelGuideBatchFetcher(client, settings),
    )
    return {f.source.value: f for f in fetchers}
