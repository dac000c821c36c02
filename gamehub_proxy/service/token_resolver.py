from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from ..domain.errors import StoreUnavailableError
from ..logging_conf import get_logger
from .store import KeyValueStore

__all__ = [
    "TokenSource",
    "ResolvedToken",
    "TokenIssuer",
    "TokenResolver",
    "ISSUER_AUTH_HEADER",
]

logger = get_logger("service.token")

ISSUER_AUTH_HEADER = "X-Worker-Auth"


class TokenSource(str, Enum):
    store = "store"
    remote_fallback = "remote-fallback"


@dataclass(frozen=True)
class ResolvedToken:
    token: str
    source: TokenSource


def _token_from(record: Any) -> Optional[str]:
    if isinstance(record, dict):
        token = record.get("token")
        if isinstance(token, str) and token:
            return token
    return None


class TokenIssuer:
    """The service that mints tokens, reached with a shared-secret header."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, auth: str) -> None:
        self._client = client
        self.base_url = base_url.rstrip("/")
        self._auth = auth

    async def fetch(self) -> Optional[str]:
        try:
            response = await self._client.get(
                f"{self.base_url}/token", headers={ISSUER_AUTH_HEADER: self._auth}
            )
        except httpx.HTTPError as e:
            logger.error("token.issuer_unreachable", extra={"event": "token_issuer_unreachable", "error": str(e)})
            return None
        if not response.is_success:
            logger.error(
                "token.issuer_rejected",
                extra={"event": "token_issuer_rejected", "status_code": response.status_code},
            )
            return None
        try:
            return _token_from(response.json())
        except ValueError:
            logger.error("token.issuer_bad_json", extra={"event": "token_issuer_bad_json"})
            return None


class TokenResolver:
    """Find the current bearer token: shared store first, then the issuer.

    ``resolve()`` never raises. ``None`` means no token is available and the
    request should go out as the client sent it.
    """

    def __init__(
        self,
        *,
        store: Optional[KeyValueStore],
        store_key: str,
        issuer: Optional[TokenIssuer] = None,
    ) -> None:
        self._store = store
        self._store_key = store_key
        self._issuer = issuer

    async def _from_store(self) -> Optional[str]:
        if self._store is None:
            return None
        try:
            raw = await self._store.get(self._store_key)
        except StoreUnavailableError:
            return None
        if not raw:
            return None
        try:
            return _token_from(json.loads(raw))
        except ValueError:
            logger.warning("token.store_bad_record", extra={"event": "token_store_bad_record"})
            return None

    async def resolve(self) -> Optional[ResolvedToken]:
        token = await self._from_store()
        if token:
            logger.info("token.resolved", extra={"event": "token_resolved", "source": TokenSource.store.value})
            return ResolvedToken(token, TokenSource.store)

        if self._issuer is not None:
            logger.warning("token.store_empty", extra={"event": "token_store_empty"})
            token = await self._issuer.fetch()
            if token:
                logger.info(
                    "token.resolved",
                    extra={"event": "token_resolved", "source": TokenSource.remote_fallback.value},
                )
                return ResolvedToken(token, TokenSource.remote_fallback)

        logger.error("token.unavailable", extra={"event": "token_unavailable"})
        return None
