#!/usr/bin/env python3
"""Seed a local redis with the records the proxy reads.

Writes a token record under the token key and a small topic listing under
the free-content key, so a locally running proxy has something to serve.

    python tools/seed_store.py --redis-url redis://localhost:6379/0 --token dev-token
"""
from __future__ import annotations

import argparse
import json
import os

import redis

TOKEN_KEY = os.getenv("GAMEHUB_TOKEN_STORE_KEY", "gamehub_token")
FREE_CONTENT_KEY = os.getenv("GAMEHUB_FREE_CONTENT_KEY", "free_games_data")


def _card(n: int) -> dict:
    return {
        "id": 1000 + n,
        "title": f"Sample game {n}",
        "steam_appid": str(200000 + n),
        "cover": f"https://example.invalid/covers/{n}.jpg",
    }


def sample_listing() -> dict:
    """Two topics: one longer than its display count, one shorter."""
    return {
        "code": 0,
        "msg": "",
        "data": [
            {
                "id": 1,
                "title": "Free this week",
                "display_card_num": 6,
                "aspect_ratio": "16:9",
                "fixed_card_size": 0,
                "is_play_video": 0,
                "is_vertical": 0,
                "is_text_outside": 1,
                "card_list": [_card(n) for n in range(1, 15)],
            },
            {
                "id": 2,
                "title": "Always free",
                "display_card_num": 6,
                "aspect_ratio": "3:4",
                "fixed_card_size": 1,
                "is_play_video": 0,
                "is_vertical": 1,
                "is_text_outside": 0,
                "card_list": [_card(n) for n in range(20, 24)],
            },
        ],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed redis for local proxy runs")
    parser.add_argument("--redis-url", default=os.getenv("GAMEHUB_REDIS_URL", "redis://localhost:6379/0"))
    parser.add_argument("--token", default="dev-token", help="token written to the token record")
    parser.add_argument("--skip-topics", action="store_true", help="leave the free-content key untouched")
    args = parser.parse_args()

    client = redis.Redis.from_url(args.redis_url, decode_responses=True)
    client.set(TOKEN_KEY, json.dumps({"token": args.token}))
    print(f"Wrote {TOKEN_KEY}")
    if not args.skip_topics:
        client.set(FREE_CONTENT_KEY, json.dumps(sample_listing(), ensure_ascii=False))
        print(f"Wrote {FREE_CONTENT_KEY}")
    client.close()


if __name__ == "__main__":
    main()
