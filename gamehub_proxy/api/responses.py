from __future__ import annotations

import time
from types import MappingProxyType
from typing import Any, Mapping

from fastapi import Response
from fastapi.responses import JSONResponse

from ..domain.errors import ProxyError

__all__ = [
    "CORS_HEADERS",
    "NO_CACHE_HEADERS",
    "UNIFORM_HEADERS",
    "now_seconds",
    "envelope",
    "json_response",
    "error_response",
    "apply_uniform_headers",
    "preflight_response",
]

CORS_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
)

NO_CACHE_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0, s-maxage=0",
        "Pragma": "no-cache",
        "Expires": "0",
    }
)

UNIFORM_HEADERS: Mapping[str, str] = MappingProxyType({**CORS_HEADERS, **NO_CACHE_HEADERS})


def now_seconds() -> str:
    """Epoch seconds as a string, the envelope's ``time`` format."""
    return str(int(time.time()))


def envelope(code: int, msg: str = "", *, time: str = "", data: Any = None) -> dict[str, Any]:
    """Build the ``{code, msg, time, data}`` body. Codes are passed through as given."""
    return {"code": code, "msg": msg, "time": time, "data": data}


def json_response(content: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code)


def error_response(err: ProxyError) -> JSONResponse:
    return json_response(err.envelope(), status_code=err.status_code)


def apply_uniform_headers(response: Response) -> Response:
    """Stamp the CORS and no-cache headers, overriding any upstream values."""
    for name, value in UNIFORM_HEADERS.items():
        response.headers[name] = value
    return response


def preflight_response() -> Response:
    return Response(status_code=200)
