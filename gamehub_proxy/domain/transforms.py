"""Per-endpoint reshaping of upstream payloads.

Each function takes an already-parsed JSON document and returns the document
to send to the client. Payloads whose ``data`` block does not have the
expected shape pass through untouched.
"""
from __future__ import annotations

import json
import math
from typing import Any, Optional

from .errors import UpstreamError
from .pagination import PaginationWindow

__all__ = [
    "DETAIL_STRIPPED_FIELDS",
    "ALL_GAMES_GROUP_ID",
    "TOPIC_FIELDS",
    "parse_upstream_json",
    "strip_fields",
    "has_steam_id",
    "filter_steam_games",
    "reshape_manifest",
    "paginate_manifest",
    "initial_topics",
    "find_topic",
    "topic_page",
]

# Recommendation and tracking blocks removed from game detail.
DETAIL_STRIPPED_FIELDS = ("recommend_game", "card_line_data")

# Group id of the "All" tab in search results.
ALL_GAMES_GROUP_ID = 0

# Topic attributes echoed by the "more cards" endpoint.
TOPIC_FIELDS = (
    "id",
    "title",
    "aspect_ratio",
    "fixed_card_size",
    "is_play_video",
    "is_vertical",
    "is_text_outside",
)


def parse_upstream_json(raw: str) -> Any:
    """Parse an upstream body, raising UpstreamError with a snippet on failure."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise UpstreamError.invalid_json(raw) from e


def _data_block(payload: Any) -> Optional[dict[str, Any]]:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return None


def strip_fields(payload: Any, fields: tuple[str, ...] = DETAIL_STRIPPED_FIELDS) -> Any:
    data = _data_block(payload)
    if data is not None:
        for name in fields:
            data.pop(name, None)
    return payload


def has_steam_id(game: Any) -> bool:
    """True when the game carries a usable Steam app id (not empty, not zero)."""
    if not isinstance(game, dict):
        return False
    appid = game.get("steam_appid")
    return bool(appid) and str(appid) != "0"


def filter_steam_games(payload: Any) -> Any:
    """Keep only Steam games and rebuild every aggregate from the kept list.

    ``total`` collapses to a single "All" group and ``all_game_ids`` is
    rebuilt in list order, so neither can disagree with ``list``.
    """
    data = _data_block(payload)
    if data is None or not isinstance(data.get("list"), list):
        return payload

    games = [g for g in data["list"] if has_steam_id(g)]
    data["list"] = games

    if data.get("total") is not None:
        data["total"] = [{"classify_group_id": ALL_GAMES_GROUP_ID, "count": len(games)}]
    if data.get("all_game_ids") is not None:
        data["all_game_ids"] = [
            {"steam_app_id": g.get("steam_appid"), "game_id": g.get("id")} for g in games
        ]
    return payload


def reshape_manifest(payload: Any) -> Any:
    """Rename a manifest's ``components`` list to ``list``."""
    data = _data_block(payload)
    if data is not None and data.get("components") is not None:
        data["list"] = data.pop("components")
    return payload


def paginate_manifest(payload: Any, window: PaginationWindow) -> Any:
    """Cut a manifest ``list`` down to one page.

    An upstream ``total`` is kept when set; otherwise the full list length is
    reported. The page size is echoed as ``pageSize``, which is what the
    client reads for this endpoint.
    """
    data = _data_block(payload)
    if data is None or not isinstance(data.get("list"), list):
        return payload

    items = data["list"]
    data["list"] = window.slice(items)
    data["page"] = window.page
    data["pageSize"] = window.page_size
    data["total"] = data.get("total") or len(items)
    return payload


def _display_limit(value: Any) -> Optional[int]:
    """Coerce ``display_card_num`` to a slice bound.

    Numeric strings and floats truncate toward zero (``"2"`` -> 2, ``2.7`` -> 2),
    anything unparsable reads as 0, and a negative count drops cards from the
    end. ``None`` and positive infinity keep the whole list.
    """
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return None if number > 0 else 0
    return int(number)


def initial_topics(listing: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a topic listing with each card list cut to its display count.

    The input is left untouched.
    """
    topics = []
    for topic in listing.get("data") or []:
        cards = topic.get("card_list") or []
        limit = _display_limit(topic.get("display_card_num"))
        topics.append({**topic, "card_list": list(cards if limit is None else cards[:limit])})
    return {**listing, "data": topics}


def find_topic(listing: dict[str, Any], topic_id: Any) -> Optional[dict[str, Any]]:
    for topic in listing.get("data") or []:
        if topic.get("id") == topic_id and type(topic.get("id")) is type(topic_id):
            return topic
    return None


def topic_page(topic: dict[str, Any], window: PaginationWindow) -> dict[str, Any]:
    """Describe one page of a topic's cards, with the topic's display metadata."""
    cards = topic.get("card_list") or []
    page = {name: topic.get(name) for name in TOPIC_FIELDS}
    page.update(
        page=window.page,
        page_size=window.page_size,
        total=len(cards),
        card_list=window.slice(cards),
    )
    return page
