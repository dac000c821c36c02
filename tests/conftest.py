"""
Pytest fixtures for the proxy tests.

Every network collaborator is served by one ``httpx.MockTransport`` routed on
host + path; key-value stores are in-memory fakes.
"""

import os

# main.py builds a module-level app at import time; it needs a secret.
os.environ.setdefault("GAMEHUB_SECRET_KEY", "test-secret")

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from gamehub_proxy.config import Settings
from gamehub_proxy.domain.errors import StoreUnavailableError

SECRET = "K"
PLACEHOLDER = "fake-token"

GAME_API = "http://game.test"
STATIC = "http://static.test"
NEWS = "http://news.test"
ISSUER = "http://issuer.test"


class FakeStore:
    """In-memory KeyValueStore. ``fail=True`` simulates an outage."""

    def __init__(self, data: Optional[Dict[str, str]] = None, *, fail: bool = False):
        self.data = dict(data or {})
        self.fail = fail
        self.reads: List[str] = []

    async def get(self, key: str) -> Optional[str]:
        self.reads.append(key)
        if self.fail:
            raise StoreUnavailableError("store down")
        return self.data.get(key)


Route = Callable[[httpx.Request], httpx.Response]


class FakeUpstreams:
    """Routes requests by ``(method, host+path)`` and records what was sent."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, route: Route) -> None:
        self.routes[(method, url)] = route

    def json(self, method: str, url: str, payload: Any, status_code: int = 200) -> None:
        self.add(method, url, lambda request: httpx.Response(status_code, json=payload))

    def text(self, method: str, url: str, body: str, status_code: int = 200, headers=None) -> None:
        self.add(method, url, lambda request: httpx.Response(status_code, text=body, headers=headers))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, text="no route")
        return route(request)

    def sent(self, url: str) -> httpx.Request:
        for request in self.requests:
            if f"{request.url.scheme}://{request.url.host}{request.url.path}" == url:
                return request
        raise AssertionError(f"nothing sent to {url}")


def token_record(token: str) -> str:
    return json.dumps({"token": token, "expires_at": 1760000000})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        secret_key=SECRET,
        placeholder_token=PLACEHOLDER,
        game_api_base=GAME_API,
        manifest_base=STATIC,
        news_base=NEWS,
        token_issuer_url=ISSUER,
        token_issuer_auth="issuer-secret",
        redis_url=None,
    )


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def http_client(upstreams) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstreams))


@pytest.fixture
def token_store() -> FakeStore:
    return FakeStore({"gamehub_token": token_record("T")})


@pytest.fixture
def content_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def client(settings, token_store, content_store, http_client):
    from gamehub_proxy.main import create_app

    app = create_app(
        settings,
        token_store=token_store,
        content_store=content_store,
        http_client=http_client,
    )
    with TestClient(app) as c:
        yield c
