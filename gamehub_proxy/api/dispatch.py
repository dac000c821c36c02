from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from fastapi import Response

from ..domain.errors import MethodNotAllowedError, ProxyError
from ..logging_conf import get_logger
from ..service.rewriter import InboundRequest
from ..service.upstream import Upstreams
from . import handlers
from .handlers import Handler
from .responses import error_response

__all__ = ["DispatchEntry", "DISPATCH_TABLE", "build_table", "Dispatcher"]

logger = get_logger("api.dispatch")


@dataclass(frozen=True)
class DispatchEntry:
    path: str
    methods: frozenset[str]
    handler: Handler


def build_table(entries: Iterable[tuple[str, Iterable[str], Handler]]) -> Mapping[str, DispatchEntry]:
    """Freeze ``(path, methods, handler)`` triples into an exact-match lookup table."""
    table: dict[str, DispatchEntry] = {}
    for path, methods, handler in entries:
        if path in table:
            raise ValueError(f"duplicate dispatch path: {path}")
        table[path] = DispatchEntry(path, frozenset(m.upper() for m in methods), handler)
    return MappingProxyType(table)


DISPATCH_TABLE = build_table(
    [
        ("/card/getGameDetail", ("GET", "POST"), handlers.game_detail),
        ("/search/getGameList", ("POST",), handlers.search_games),
        ("/card/getNewsList", ("POST",), handlers.news_list),
        ("/card/getNewsGuideDetail", ("POST",), handlers.news_detail),
        ("/card/getIndexList", ("GET", "POST"), handlers.index_list),
        ("/card/more", ("POST",), handlers.topic_more),
        ("/card/getGameIcon", ("POST",), handlers.game_icon),
        (handlers.EXECUTE_SCRIPT_PATH, ("POST",), handlers.relay(handlers.EXECUTE_SCRIPT_PATH)),
        (handlers.CHECK_USER_TIMER_PATH, ("POST",), handlers.relay(handlers.CHECK_USER_TIMER_PATH)),
        ("/base/getBaseInfo", ("POST",), handlers.base_info),
        ("/game/getDnsIpPool", ("POST",), handlers.dns_pool),
        ("/game/getSteamHost", ("GET",), handlers.steam_hosts),
        ("/simulator/v2/getComponentList", ("POST",), handlers.component_list),
    ]
)


class Dispatcher:
    """Route a request to its handler by exact path, then method.

    Unknown paths go to ``fallback``; a known path with the wrong method is a
    405. ProxyErrors raised by handlers become error envelopes here.
    """

    def __init__(
        self,
        upstreams: Upstreams,
        *,
        table: Mapping[str, DispatchEntry] = DISPATCH_TABLE,
        fallback: Handler = handlers.static_fallback,
    ) -> None:
        self._upstreams = upstreams
        self._table = table
        self._fallback = fallback

    def lookup(self, path: str, method: str) -> Handler:
        entry = self._table.get(path)
        if entry is None:
            return self._fallback
        if method.upper() not in entry.methods:
            raise MethodNotAllowedError()
        return entry.handler

    async def dispatch(self, request: InboundRequest) -> Response:
        try:
            handler = self.lookup(request.path, request.method)
            logger.info(
                "dispatch.route",
                extra={
                    "event": "dispatch_route",
                    "path": request.path,
                    "method": request.method,
                    "handler": handler.__name__,
                },
            )
            return await handler(request, self._upstreams)
        except ProxyError as e:
            logger.warning(
                "dispatch.error",
                extra={
                    "event": "dispatch_error",
                    "path": request.path,
                    "status_code": e.status_code,
                    "error_message": e.msg,
                },
            )
            return error_response(e)
