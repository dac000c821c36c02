from __future__ import annotations

from typing import Any

__all__ = [
    "ProxyError",
    "BadRequestError",
    "NotFoundError",
    "MethodNotAllowedError",
    "UpstreamError",
    "StoreUnavailableError",
    "SNIPPET_LENGTH",
]

# How much of a bad upstream body is echoed back for diagnostics.
SNIPPET_LENGTH = 100


class ProxyError(Exception):
    """Base class for failures that end a request with an error envelope.

    ``status_code`` is the HTTP status; the envelope ``code`` mirrors it
    unless overridden. ``time`` and ``data`` are echoed verbatim because
    endpoints disagree on what an empty value looks like.
    """

    status_code: int = 500

    def __init__(
        self,
        msg: str,
        *,
        code: int | None = None,
        time: str = "",
        data: Any = None,
    ) -> None:
        super().__init__(msg)
        self.msg = msg
        self.code = self.status_code if code is None else code
        self.time = time
        self.data = data

    def envelope(self) -> dict[str, Any]:
        return {"code": self.code, "msg": self.msg, "time": self.time, "data": self.data}


class BadRequestError(ProxyError):
    status_code = 400


class NotFoundError(ProxyError):
    status_code = 404


class MethodNotAllowedError(ProxyError):
    status_code = 405

    def __init__(self, msg: str = "Method not allowed", **kwargs: Any) -> None:
        super().__init__(msg, **kwargs)


class UpstreamError(ProxyError):
    """An upstream was unreachable or answered with something unusable."""

    status_code = 500

    @classmethod
    def invalid_json(cls, raw: str, **kwargs: Any) -> "UpstreamError":
        return cls(f"Upstream returned invalid response: {raw[:SNIPPET_LENGTH]}", **kwargs)


class StoreUnavailableError(RuntimeError):
    """The key-value store could not be read."""
