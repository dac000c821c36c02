"""FastAPI app factory: health endpoint plus the mediation catch-all route."""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Optional
from uuid import uuid4

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from gamehub_proxy import __version__
from gamehub_proxy.api import router as api_router
from gamehub_proxy.api.dispatch import Dispatcher
from gamehub_proxy.api.pipeline import Pipeline
from gamehub_proxy.api.responses import apply_uniform_headers
from gamehub_proxy.config import Settings, get_settings
from gamehub_proxy.logging_conf import get_logger, setup_logging
from gamehub_proxy.service.rewriter import RequestRewriter
from gamehub_proxy.service.store import KeyValueStore, RedisStore
from gamehub_proxy.service.token_resolver import TokenIssuer, TokenResolver
from gamehub_proxy.service.upstream import GameDataApi, ManifestHost, NewsService, Upstreams

logger = get_logger("app")


def create_app(
    settings: Optional[Settings] = None,
    *,
    token_store: Optional[KeyValueStore] = None,
    content_store: Optional[KeyValueStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the proxy app.

    Collaborators default to what ``settings`` describes: one shared httpx
    client, and a redis store when ``redis_url`` is set. Passing them in
    replaces the defaults; injected clients are not closed on shutdown.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    owned_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)

    redis_store: Optional[RedisStore] = None
    if settings.redis_url and (token_store is None or content_store is None):
        redis_store = RedisStore.from_url(settings.redis_url)
    token_store = token_store or redis_store
    content_store = content_store or redis_store

    issuer = None
    if settings.token_issuer_url:
        issuer = TokenIssuer(client, settings.token_issuer_url, settings.token_issuer_auth)
    resolver = TokenResolver(store=token_store, store_key=settings.token_store_key, issuer=issuer)
    rewriter = RequestRewriter(
        resolver,
        placeholder=settings.placeholder_token,
        secret=settings.secret_key,
    )
    upstreams = Upstreams(
        settings=settings,
        game_api=GameDataApi(client, settings.game_api_base),
        manifests=ManifestHost(client, settings.manifest_base),
        news=NewsService(client, settings.news_base),
        free_content=content_store,
    )

    app = FastAPI(title="GameHub API Proxy", version=__version__)
    app.state.settings = settings
    app.state.pipeline = Pipeline(rewriter, Dispatcher(upstreams))

    @app.on_event("startup")
    async def _on_startup() -> None:
        logger.info(
            "startup",
            extra={
                "event": "startup",
                "token_store": token_store is not None,
                "content_store": content_store is not None,
                "token_issuer": issuer is not None,
            },
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        if owned_client:
            await client.aclose()
        if redis_store is not None:
            await redis_store.close()
        logger.info("shutdown", extra={"event": "shutdown"})

    @app.middleware("http")
    async def request_logger(request: Request, call_next: Callable[[Request], Response]):
        """Per-request JSON logging plus the headers every proxy response carries.

        - An incoming X-Request-ID is reused; otherwise a fresh one is minted
        - Start and end events are logged with method/path/status/elapsed_ms
        - CORS and no-cache headers are stamped here, so health, preflight and
          error responses get them too
        """
        # Correlation id: client-supplied or new.
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        start = time.perf_counter()
        logger.info(
            "request.start",
            extra={
                "event": "request_start",
                "method": request.method,
                "path": request.url.path,
                "request_id": request_id,
            },
        )
        try:
            response = await call_next(request)
        except Exception:  # Logged here, re-raised for FastAPI to turn into a 500
            logger.exception(
                "request.error",
                extra={
                    "event": "request_error",
                    "path": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                },
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0

        # Echo the id back, then overwrite any CORS/cache headers an upstream sent.
        response.headers["X-Request-ID"] = request_id
        apply_uniform_headers(response)
        logger.info(
            "request.end",
            extra={
                "event": "request_end",
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "request_id": request_id,
            },
        )
        return response

    @app.get("/health", summary="Liveness check")
    async def health() -> JSONResponse:
        return JSONResponse(content={"ok": True})

    app.include_router(api_router)

    return app


# ASGI entrypoint: `uvicorn gamehub_proxy.main:app`. Requires GAMEHUB_SECRET_KEY.
app = create_app()
