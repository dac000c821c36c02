from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Any, Optional

import httpx

from ..domain.errors import BadRequestError
from ..domain.signing import SIGN_FIELD, sign
from ..logging_conf import get_logger
from .token_resolver import TokenResolver

__all__ = [
    "InboundRequest",
    "RequestRewriter",
    "AUTH_HEADER",
    "TOKEN_HEADER",
    "TOKEN_FIELD",
]

logger = get_logger("service.rewriter")

AUTH_HEADER = "Authorization"
TOKEN_HEADER = "token"
TOKEN_FIELD = "token"


def _parse_float(text: str) -> Any:
    # Integral floats (`5.0`) re-serialize as ints (`5`).
    value = float(text)
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


@dataclass(frozen=True)
class InboundRequest:
    """A client request with its body already read.

    The body is captured once when the request arrives and travels with the
    value through every later stage.
    """

    method: str
    path: str
    query: httpx.QueryParams = field(default_factory=httpx.QueryParams)
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: bytes = b""

    @cached_property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_json(self) -> bool:
        return "application/json" in self.headers.get("content-type", "")

    def json_object(self) -> dict[str, Any]:
        """Parse the body as a JSON object; an empty body reads as ``{}``."""
        if not self.body.strip():
            return {}
        try:
            parsed = json.loads(self.text)
        except ValueError as e:
            raise BadRequestError("Invalid request body") from e
        if not isinstance(parsed, dict):
            raise BadRequestError("Invalid request body")
        return parsed


class RequestRewriter:
    """Swap the client's placeholder token for a real one and re-sign the body.

    Requests without the placeholder are returned as the same object, as are
    requests for which no real token could be resolved.
    """

    def __init__(self, resolver: TokenResolver, *, placeholder: str, secret: str) -> None:
        self._resolver = resolver
        self.placeholder = placeholder
        self._secret = secret

    def _auth_hit(self, request: InboundRequest) -> bool:
        return self.placeholder in request.headers.get(AUTH_HEADER, "")

    def _token_header_hit(self, request: InboundRequest) -> bool:
        return request.headers.get(TOKEN_HEADER) == self.placeholder

    def _body_hit(self, request: InboundRequest) -> bool:
        return request.method == "POST" and request.is_json and self.placeholder in request.text

    def needs_rewrite(self, request: InboundRequest) -> bool:
        return self._auth_hit(request) or self._token_header_hit(request) or self._body_hit(request)

    def _resign_body(self, request: InboundRequest, token: str) -> Optional[bytes]:
        try:
            fields = json.loads(request.text, parse_float=_parse_float)
        except ValueError:
            fields = None
        if not isinstance(fields, dict):
            logger.warning(
                "rewrite.body_skipped",
                extra={"event": "rewrite_body_skipped", "path": request.path},
            )
            return None

        fields[TOKEN_FIELD] = token
        fields[SIGN_FIELD] = sign(fields, self._secret)
        return json.dumps(fields, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    async def rewrite(self, request: InboundRequest) -> InboundRequest:
        if not self.needs_rewrite(request):
            return request

        resolved = await self._resolver.resolve()
        if resolved is None:
            logger.error(
                "rewrite.no_token",
                extra={"event": "rewrite_no_token", "path": request.path},
            )
            return request

        headers = request.headers.copy()
        if self._auth_hit(request):
            headers[AUTH_HEADER] = request.headers[AUTH_HEADER].replace(
                self.placeholder, resolved.token, 1
            )
        if self._token_header_hit(request):
            headers[TOKEN_HEADER] = resolved.token

        body = request.body
        resigned = False
        if self._body_hit(request):
            new_body = self._resign_body(request, resolved.token)
            if new_body is not None:
                body, resigned = new_body, True

        logger.info(
            "rewrite.applied",
            extra={
                "event": "rewrite_applied",
                "path": request.path,
                "token_source": resolved.source.value,
                "body_resigned": resigned,
            },
        )
        return replace(request, headers=headers, body=body)
