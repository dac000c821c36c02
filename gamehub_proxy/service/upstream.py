"""httpx clients for the network collaborators.

All calls are single attempt. Transport failures surface as UpstreamError;
HTTP error statuses are returned to the caller, which decides what they mean.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..config import Settings
from ..domain.errors import UpstreamError
from ..logging_conf import get_logger
from .store import KeyValueStore

__all__ = [
    "HOP_BY_HOP_HEADERS",
    "forwardable_headers",
    "GameDataApi",
    "ManifestHost",
    "NewsService",
    "Upstreams",
]

logger = get_logger("service.upstream")

# Never copied between hops: connection-scoped, or recomputed by httpx/Starlette.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-connection",
        "transfer-encoding",
        "te",
        "trailer",
        "upgrade",
        "host",
        "content-length",
        "content-encoding",
    }
)


def forwardable_headers(headers: Iterable[tuple[str, str]]) -> httpx.Headers:
    """Copy headers, dropping hop-by-hop and length/encoding headers."""
    return httpx.Headers([(k, v) for k, v in headers if k.lower() not in HOP_BY_HOP_HEADERS])


async def _send(client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        logger.warning(
            "upstream.unreachable",
            extra={"event": "upstream_unreachable", "method": method, "url": url, "error": str(e)},
        )
        raise UpstreamError(f"Upstream request failed: {e.__class__.__name__}: {e}") from e
    logger.info(
        "upstream.response",
        extra={
            "event": "upstream_response",
            "method": method,
            "url": url,
            "status_code": response.status_code,
        },
    )
    return response


class GameDataApi:
    """The remote game-data API. Every call is a signed POST."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    async def post(self, path: str, *, headers: httpx.Headers, body: bytes) -> httpx.Response:
        return await _send(self._client, "POST", f"{self.base_url}{path}", headers=headers, content=body)


class ManifestHost:
    """Static JSON/text documents addressed by path suffix."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    async def fetch(self, path: str) -> httpx.Response:
        return await _send(self._client, "GET", f"{self.base_url}{path}")


class NewsService:
    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")

    async def list_news(self, page: int, page_size: int) -> httpx.Response:
        return await _send(
            self._client,
            "GET",
            f"{self.base_url}/api/news/list",
            params={"page": page, "page_size": page_size},
        )

    async def detail(self, news_id: Any) -> httpx.Response:
        return await _send(self._client, "GET", f"{self.base_url}/api/news/detail/{news_id}")


@dataclass(frozen=True)
class Upstreams:
    """Collaborator handles passed to every endpoint handler."""

    settings: Settings
    game_api: GameDataApi
    manifests: ManifestHost
    news: NewsService
    free_content: Optional[KeyValueStore] = None
