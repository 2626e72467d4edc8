"""
Request handlers for the preview and batch entry points.

Handlers are plain async functions over an explicit request value and the
collaborators they need (metadata fetcher, edge cache, scheduler, settings).
They hold no state of their own; the FastAPI layer in ``server`` only wires
collaborators in from ``app.state``.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi.responses import HTMLResponse, JSONResponse, Response

from ..config import get_api_logger
from ..config.settings import Settings
from ..models import ArticleSource, FetchStatus
from ..processing.bot_classifier import ClientClass, classify
from ..processing.preview_renderer import render
from ..services.batch_fetcher import is_language_code
from ..services.edge_cache import EdgeCache, Scheduler
from ..services.metadata_fetcher import MetadataFetcher

logger = get_api_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class PreviewRequest:
    url: str
    article_ref: Optional[str]
    user_agent: Optional[str]


@dataclass(frozen=True)
class BatchQuery:
    mode: str
    language: str
    count: int

    @classmethod
    def from_params(
        cls,
        mode: Optional[str],
        lang: Optional[str],
        n: Optional[str],
        settings: Settings,
    ) -> "BatchQuery":
        """
        Normalize raw query parameters.

        Unknown modes fall back to ``wiki``, malformed language codes to
        ``en``; the count defaults when unparseable and is clamped to
        ``1..batch_max_count``.
        """
        if mode != ArticleSource.TRAVEL_GUIDE.value:
            mode = ArticleSource.ENCYCLOPEDIA.value

        language = (lang or DEFAULT_LANGUAGE).strip().lower()
        if not is_language_code(language):
            language = DEFAULT_LANGUAGE

        try:
            count = int(n) if n not in (None, "") else settings.batch_default_count
        except ValueError:
            count = settings.batch_default_count
        count = max(1, min(count, settings.batch_max_count))

        return cls(mode=mode, language=language, count=count)


async def handle_preview(
    request: PreviewRequest, fetcher: MetadataFetcher, settings: Settings
) -> Optional[Response]:
    """
    Build the crawler preview for ``request``.

    Returns None when the request should pass through to the regular page:
    no article reference, a human visitor, or an article that could not be
    resolved.
    """
    if not request.article_ref:
        return None

    if classify(request.user_agent) is ClientClass.HUMAN:
        return None

    result = await fetcher.resolve(request.article_ref)
    if not result.ok:
        if result.status is FetchStatus.UNAVAILABLE:
            logger.warning(
                "Preview upstream unavailable, passing through",
                article_ref=request.article_ref,
                reason=result.reason,
            )
        return None

    logger.info(
        "Serving crawler preview",
        article_ref=request.article_ref,
        user_agent=request.user_agent,
    )
    return HTMLResponse(
        content=render(result.value, request.url, settings.product_name),
        headers={"Cache-Control": f"public, max-age={settings.preview_max_age}"},
        media_type="text/html;charset=UTF-8",
    )


def preflight_response() -> Response:
    """Empty acknowledgment for CORS preflight requests."""
    return Response(status_code=200, headers=dict(CORS_HEADERS))


async def handle_batch(
    query: BatchQuery,
    cache: EdgeCache,
    settings: Settings,
    schedule: Optional[Scheduler] = None,
) -> JSONResponse:
    """Serve a validated article batch from the edge cache."""
    lookup = await cache.get_or_compute(
        query.mode, query.language, query.count, schedule=schedule
    )

    logger.info(
        "Article batch served",
        mode=query.mode,
        language=query.language,
        count=query.count,
        returned=len(lookup.articles),
        cache=lookup.status.value,
    )
    return JSONResponse(
        content={
            "articles": [a.model_dump(mode="json") for a in lookup.articles],
            "cachedAt": lookup.stored_at.isoformat(),
        },
        headers={
            **CORS_HEADERS,
            "Cache-Control": f"public, max-age={settings.batch_max_age}",
            "X-Cache": lookup.status.value,
        },
    )
