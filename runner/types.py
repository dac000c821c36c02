from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Probe:
    """One request the smoke run sends to the proxy."""

    name: str
    method: str
    path: str
    json: Optional[dict[str, Any]] = None
    params: Optional[dict[str, Any]] = None
    expect_status: int = 200


@dataclass
class ProbeResult:
    """Outcome of a single probe."""

    probe: Probe
    status_code: Optional[int]
    elapsed_ms: float
    missing_headers: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code == self.probe.expect_status
            and not self.missing_headers
        )


class SmokeError(RuntimeError):
    """Raised when the smoke flow cannot proceed (e.g., health never ready)."""
