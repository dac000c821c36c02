"""One coroutine per proxied endpoint.

Every handler takes the (already rewritten) inbound request and the
collaborator handles, and returns a response. Expected failures are raised
as ProxyError subclasses and rendered by the dispatcher.
"""
from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Response
from fastapi.responses import PlainTextResponse

from ..domain.errors import BadRequestError, NotFoundError, StoreUnavailableError, UpstreamError
from ..domain.manifests import BASE_INFO_PATH, DNS_POOL_PATH, STEAM_HOST_PATH, manifest_path
from ..domain.pagination import window_from
from ..domain.transforms import (
    filter_steam_games,
    find_topic,
    initial_topics,
    paginate_manifest,
    parse_upstream_json,
    reshape_manifest,
    strip_fields,
    topic_page,
)
from ..logging_conf import get_logger
from ..service.rewriter import InboundRequest
from ..service.upstream import Upstreams, forwardable_headers
from .models import ComponentListRequest, NewsDetailRequest, PageRequest, TopicMoreRequest, parse_body
from .responses import envelope, json_response, now_seconds

logger = get_logger("api.handlers")

Handler = Callable[[InboundRequest, Upstreams], Awaitable[Response]]

GAME_DETAIL_PATH = "/card/getGameDetail"
GAME_LIST_PATH = "/search/getGameList"
EXECUTE_SCRIPT_PATH = "/simulator/executeScript"
CHECK_USER_TIMER_PATH = "/cloud/game/check_user_timer"

# Free-content store code meaning "nothing published yet".
NO_DATA_CODE = 201


# ------------------------
# Game-data API
# ------------------------

def _upstream_headers(request: InboundRequest):
    # Host, length and connection headers belong to the inbound hop; httpx sets its own.
    return forwardable_headers(request.headers.multi_items())


async def game_detail(request: InboundRequest, ctx: Upstreams) -> Response:
    """Game detail, always fetched upstream with a POST.

    - GET ``?app_id=...`` is turned into the JSON body older clients send;
      a GET without ``app_id`` is a 400
    - POST bodies are forwarded as-is (already token-rewritten)
    - Recommendation blocks are stripped from the reply
    """
    headers = _upstream_headers(request)
    # Upstream only accepts POST with a JSON body, whatever the client sent.
    headers["Content-Type"] = "application/json"

    if request.method == "GET":
        # GET shim: app_id first, then the remaining query params in arrival order.
        app_id = request.query.get("app_id")
        if not app_id:
            raise BadRequestError("Missing app_id parameter")
        params = {"app_id": app_id}
        for key, value in request.query.multi_items():
            if key != "app_id":
                params[key] = value
        body = json.dumps(params, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        logger.info("detail.get_to_post", extra={"event": "detail_get_to_post", "params": sorted(params)})
    else:
        body = request.body

    upstream = await ctx.game_api.post(GAME_DETAIL_PATH, headers=headers, body=body)
    payload = parse_upstream_json(upstream.text)
    return json_response(strip_fields(payload))


async def search_games(request: InboundRequest, ctx: Upstreams) -> Response:
    upstream = await ctx.game_api.post(GAME_LIST_PATH, headers=_upstream_headers(request), body=request.body)
    payload = filter_steam_games(parse_upstream_json(upstream.text))
    return json_response(payload)


def relay(path: str) -> Handler:
    """Forward the body and headers to the game-data API and return its JSON as-is."""

    async def handler(request: InboundRequest, ctx: Upstreams) -> Response:
        upstream = await ctx.game_api.post(path, headers=_upstream_headers(request), body=request.body)
        return json_response(parse_upstream_json(upstream.text))

    handler.__name__ = f"relay{path.replace('/', '_')}"
    return handler


# ------------------------
# News
# ------------------------

async def news_list(request: InboundRequest, ctx: Upstreams) -> Response:
    req = parse_body(PageRequest, request)
    window = window_from(req.page, req.page_size, default_size=ctx.settings.news_page_size)
    upstream = await ctx.news.list_news(window.page, window.page_size)
    if not upstream.is_success:
        raise UpstreamError("Failed to fetch news", data=[])
    return json_response(parse_upstream_json(upstream.text))


async def news_detail(request: InboundRequest, ctx: Upstreams) -> Response:
    req = parse_body(NewsDetailRequest, request)
    if not req.id:
        raise BadRequestError("Missing id parameter")
    upstream = await ctx.news.detail(req.id)
    if not upstream.is_success:
        raise NotFoundError("News not found")
    return json_response(parse_upstream_json(upstream.text))


# ------------------------
# Free content
# ------------------------

async def _read_listing(ctx: Upstreams) -> Any:
    """Return the parsed topic listing, or None when the store holds nothing."""
    if ctx.free_content is None:
        return None
    raw = await ctx.free_content.get(ctx.settings.free_content_key)
    if not raw:
        return None
    listing = json.loads(raw)
    if not isinstance(listing, dict) or not isinstance(listing.get("data"), list):
        raise ValueError("topic listing has no data list")
    return listing


async def index_list(request: InboundRequest, ctx: Upstreams) -> Response:
    """All topics, each cut to its display count. ``topic_type`` is accepted and ignored."""
    if request.method == "GET":
        logger.info(
            "topics.index",
            extra={"event": "topics_index", "topic_type": request.query.get("topic_type")},
        )
    try:
        listing = await _read_listing(ctx)
    except (StoreUnavailableError, ValueError) as e:
        logger.error("topics.read_failed", extra={"event": "topics_read_failed", "error": str(e)})
        raise UpstreamError("Internal server error", time=now_seconds(), data=[]) from e

    if listing is None:
        return json_response(
            envelope(
                NO_DATA_CODE,
                "No free games available at the moment, please try again later",
                time=now_seconds(),
                data=[],
            )
        )
    return json_response(initial_topics(listing))


async def topic_more(request: InboundRequest, ctx: Upstreams) -> Response:
    req = parse_body(TopicMoreRequest, request)
    if not req.id:
        raise BadRequestError("Missing topic ID", time=now_seconds())
    window = window_from(req.page, req.page_size, default_size=ctx.settings.topic_page_size)

    try:
        listing = await _read_listing(ctx)
    except (StoreUnavailableError, ValueError) as e:
        logger.error("topics.read_failed", extra={"event": "topics_read_failed", "error": str(e)})
        raise UpstreamError("Internal server error", time=now_seconds()) from e

    if listing is None:
        return json_response(envelope(NO_DATA_CODE, "No data available", time=now_seconds()))

    topic = find_topic(listing, req.id)
    if topic is None:
        raise NotFoundError("Topic not found", time=now_seconds())
    return json_response(envelope(0, "", time=now_seconds(), data=topic_page(topic, window)))


async def game_icon(request: InboundRequest, ctx: Upstreams) -> Response:
    return json_response(envelope(200, "", time=now_seconds(), data=[]))


# ------------------------
# Static manifests
# ------------------------

def static_json(path: str, failure: str) -> Handler:
    """Serve a JSON document from the manifest host unchanged."""

    async def handler(request: InboundRequest, ctx: Upstreams) -> Response:
        upstream = await ctx.manifests.fetch(path)
        if not upstream.is_success:
            raise UpstreamError(failure)
        return json_response(parse_upstream_json(upstream.text))

    handler.__name__ = f"static{path.replace('/', '_')}"
    return handler


base_info = static_json(BASE_INFO_PATH, "Failed to fetch base info")
dns_pool = static_json(DNS_POOL_PATH, "Failed to fetch DNS pool")


async def steam_hosts(request: InboundRequest, ctx: Upstreams) -> Response:
    upstream = await ctx.manifests.fetch(STEAM_HOST_PATH)
    if not upstream.is_success:
        raise UpstreamError("Failed to fetch Steam hosts")
    return PlainTextResponse(upstream.text)


async def component_list(request: InboundRequest, ctx: Upstreams) -> Response:
    req = parse_body(ComponentListRequest, request)
    path = manifest_path(req.type)
    if path is None:
        raise BadRequestError("Invalid type parameter")

    upstream = await ctx.manifests.fetch(path)
    if not upstream.is_success:
        raise UpstreamError("Failed to fetch manifest")

    window = window_from(req.page, req.page_size, default_size=ctx.settings.component_page_size)
    payload = reshape_manifest(parse_upstream_json(upstream.text))
    return json_response(paginate_manifest(payload, window))


async def static_fallback(request: InboundRequest, ctx: Upstreams) -> Response:
    """Anything unrouted is served from the manifest host under the same path."""
    upstream = await ctx.manifests.fetch(request.path)
    # Status and body pass through; hop-by-hop response headers are dropped.
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=dict(forwardable_headers(upstream.headers.multi_items())),
    )
