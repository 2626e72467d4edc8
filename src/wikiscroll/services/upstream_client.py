"""
Thin async JSON client for the Wikimedia APIs.

Every call returns a FetchResult instead of raising: transport errors,
non-2xx statuses and undecodable bodies all become ``UNAVAILABLE`` (404
becomes ``NOT_FOUND``), so a single bad upstream response never aborts a
batch or a preview.
"""

from typing import Any, Dict, Optional

import httpx

from ..config import get_settings, get_service_logger
from ..config.settings import Settings
from ..core.exceptions import ExternalServiceException
from ..models.fetch_result import FetchResult


def create_http_client(settings: Optional[Settings] = None, **kwargs) -> httpx.AsyncClient:
    """Shared AsyncClient with the explicit per-request timeout and UA headers."""
    settings = settings or get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=True,
        headers={
            "User-Agent": settings.user_agent,
            "Api-User-Agent": settings.user_agent,
            "Accept": "application/json",
        },
        **kwargs,
    )


class UpstreamClient:
    """Issues GET requests against upstream APIs and classifies the outcome."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client
        self.logger = get_service_logger("UpstreamClient")

    async def get_json(
        self, url: str, params: Optional[Dict[str, str]] = None
    ) -> FetchResult[Any]:
        try:
            return FetchResult.success(await self._get(url, params))
        except ExternalServiceException as e:
            status = (e.context or {}).get("status")
            if status == 404:
                return FetchResult.not_found(e.message)
            self.logger.debug("Upstream request failed", url=url, reason=e.message)
            return FetchResult.unavailable(e.message)

    async def _get(self, url: str, params: Optional[Dict[str, str]]) -> Any:
        """
        Perform the request and decode JSON.

        Raises:
            ExternalServiceException: transport error, HTTP error status or
                malformed JSON
        """
        try:
            response = await self.http_client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ExternalServiceException(
                f"HTTP error {status}: {url}", context={"status": status}
            )
        except httpx.HTTPError as e:
            raise ExternalServiceException(
                f"Request to {url} failed: {e.__class__.__name__}", context={}
            )

        try:
            return response.json()
        except ValueError:
            raise ExternalServiceException(f"Malformed JSON from {url}", context={})
