"""
Resolves a shared article reference (``w123`` / ``v456``) to link-preview
metadata with a single MediaWiki ``action=query`` call.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from ..config import get_settings, get_service_logger
from ..config.settings import Settings
from ..core.exceptions import InvalidReferenceError
from ..models import (
    ArticleReference,
    ArticleSource,
    FetchResult,
    NormalizedPreview,
    MAX_DESCRIPTION_LENGTH,
)
from .upstream_client import UpstreamClient

SOURCE_LABELS = {
    ArticleSource.ENCYCLOPEDIA: "Wikipedia",
    ArticleSource.TRAVEL_GUIDE: "Wikivoyage",
}


class MetadataFetcher:
    """Upstream metadata lookup for the crawler preview path."""

    def __init__(self, client: UpstreamClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or get_settings()
        self.logger = get_service_logger("MetadataFetcher")

    def domain_for(self, source: ArticleSource) -> str:
        host = (
            self.settings.encyclopedia_host
            if source is ArticleSource.ENCYCLOPEDIA
            else self.settings.travel_guide_host
        )
        return f"{self.settings.preview_language}.{host}"

    async def resolve(self, raw_reference: str) -> FetchResult[NormalizedPreview]:
        """
        Resolve an article reference to a NormalizedPreview.

        Invalid references return NOT_FOUND without touching the network.
        Upstream failures return UNAVAILABLE; a missing page returns NOT_FOUND.
        This method never raises.
        """
        try:
            reference = ArticleReference.parse(raw_reference)
        except InvalidReferenceError as e:
            return FetchResult.not_found(e.message)

        domain = self.domain_for(reference.source)
        result = await self.client.get_json(
            f"https://{domain}/w/api.php",
            params={
                "action": "query",
                "pageids": reference.page_id,
                "prop": "extracts|pageimages|info",
                "exintro": "1",
                "explaintext": "1",
                "piprop": "thumbnail",
                "pithumbsize": "1200",
                "inprop": "url",
                "format": "json",
                "origin": "*",
            },
        )
        if not result.ok:
            self.logger.info(
                "Article metadata unavailable",
                reference=str(reference),
                status=result.status.value,
                reason=result.reason,
            )
            return FetchResult(result.status, reason=result.reason)

        page = self._first_page(result.value)
        if page is None:
            return FetchResult.not_found(f"Page {reference} is missing")

        return FetchResult.success(self._to_preview(page, reference, domain))

    @staticmethod
    def _first_page(payload: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(payload, dict):
            return None
        pages = (payload.get("query") or {}).get("pages")
        if not isinstance(pages, dict) or not pages:
            return None
        page = next(iter(pages.values()))
        if not isinstance(page, dict) or "missing" in page or "invalid" in page:
            return None
        return page

    def _to_preview(
        self, page: Dict[str, Any], reference: ArticleReference, domain: str
    ) -> NormalizedPreview:
        title = page.get("title") or self.settings.product_name
        extract = page.get("extract") or ""
        description = extract[:MAX_DESCRIPTION_LENGTH].replace("\r", " ").replace("\n", " ")
        thumbnail = page.get("thumbnail") or {}
        image = (
            thumbnail.get("source") if isinstance(thumbnail, dict) else None
        ) or self.settings.default_preview_image

        return NormalizedPreview(
            title=title,
            description=description,
            image=image,
            canonical_url=page.get("fullurl") or f"https://{domain}/wiki/{quote(title)}",
            source_label=SOURCE_LABELS[reference.source],
        )
