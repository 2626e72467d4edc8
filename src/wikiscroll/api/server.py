"""
FastAPI server for the WikiScroll edge service.

Two entry points share one application:

* ``GET /?a=<ref>``: crawler-aware link previews; humans get the app page.
* ``GET|OPTIONS /api/articles``: edge-cached batches of validated articles.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response

from .. import __version__
from ..config import get_settings, get_api_logger
from ..config.settings import Settings
from ..services.batch_fetcher import build_batch_fetchers
from ..services.edge_cache import Clock, EdgeCache
from ..services.metadata_fetcher import MetadataFetcher
from ..services.upstream_client import UpstreamClient, create_http_client
from .handlers import (
    BatchQuery,
    PreviewRequest,
    handle_batch,
    handle_preview,
    preflight_response,
)

logger = get_api_logger(__name__)


# Application lifespan management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    logger.info("Starting WikiScroll edge service", version=__version__)
    try:
        yield
    finally:
        if app.state.owns_http_client:
            await app.state.http_client.aclose()
        logger.info("WikiScroll edge service stopped")


# Dependencies: collaborators live on app.state
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metadata_fetcher(request: Request) -> MetadataFetcher:
    return request.app.state.metadata_fetcher


def get_edge_cache(request: Request) -> EdgeCache:
    return request.app.state.edge_cache


def pass_through(settings: Settings) -> Response:
    """Serve the regular app page untouched."""
    index_path = Path(settings.static_dir) / settings.index_file
    if not index_path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(index_path, media_type="text/html")


router = APIRouter()


@router.api_route("/", methods=["GET", "HEAD"])
async def index(
    request: Request,
    a: Optional[str] = Query(default=None, description="Article reference, e.g. w12345"),
    fetcher: MetadataFetcher = Depends(get_metadata_fetcher),
    settings: Settings = Depends(get_app_settings),
):
    """App page for humans, Open Graph preview for link-unfurling crawlers."""
    preview = await handle_preview(
        PreviewRequest(
            url=str(request.url),
            article_ref=a,
            user_agent=request.headers.get("user-agent"),
        ),
        fetcher,
        settings,
    )
    return preview if preview is not None else pass_through(settings)


@router.options("/api/articles")
async def articles_preflight():
    return preflight_response()


@router.get("/api/articles")
async def articles(
    background_tasks: BackgroundTasks,
    mode: Optional[str] = Query(default=None, description="wiki or how"),
    lang: Optional[str] = Query(default=None, description="Language code"),
    n: Optional[str] = Query(default=None, description="Batch size, 1-20"),
    cache: EdgeCache = Depends(get_edge_cache),
    settings: Settings = Depends(get_app_settings),
):
    """
    Validated random articles, cached per (mode, lang, n).

    The cache write on a miss runs as a background task after the response
    has been sent.
    """
    query = BatchQuery.from_params(mode, lang, n, settings)
    return await handle_batch(query, cache, settings, schedule=background_tasks.add_task)


@router.get("/health")
async def health_check(cache: EdgeCache = Depends(get_edge_cache)):
    return {
        "status": "healthy",
        "version": __version__,
        "cache": cache.stats(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", path=request.url.path, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": "internal_error"},
    )


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the application with its collaborators.

    Args:
        settings: defaults to the global settings
        http_client: shared upstream client; created (and closed on
            shutdown) when omitted
        clock: edge cache clock, defaults to UTC now
    """
    settings = settings or get_settings()
    owns_http_client = http_client is None
    http_client = http_client or create_http_client(settings)
    upstream = UpstreamClient(http_client)

    app = FastAPI(
        title="WikiScroll Edge",
        description="Edge-cached article batches and crawler link previews",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.owns_http_client = owns_http_client
    app.state.metadata_fetcher = MetadataFetcher(upstream, settings)
    app.state.edge_cache = EdgeCache(
        build_batch_fetchers(upstream, settings), settings=settings, clock=clock
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.include_router(router)
    app.add_exception_handler(Exception, global_exception_handler)
    return app


app = create_app()
