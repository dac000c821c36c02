from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from gamehub_proxy.api.responses import UNIFORM_HEADERS
from gamehub_proxy.logging_conf import get_logger
from runner.types import Probe, ProbeResult, SmokeError

logger = get_logger("runner.client")


async def wait_for_health(base_url: str, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    async with httpx.AsyncClient(base_url=base_url, timeout=5.0) as client:
        while time.monotonic() < deadline:
            try:
                r = await client.get("/health")
                if r.status_code == 200 and r.json().get("ok") is True:
                    logger.info("health.ok", extra={"event": "health_ok"})
                    return
            except (httpx.HTTPError, ValueError):
                pass
            await asyncio.sleep(0.25)
    raise SmokeError("Health check did not pass within timeout")


async def run_probe(client: httpx.AsyncClient, probe: Probe) -> ProbeResult:
    """Send one probe and check its status and the uniform response headers.

    Probes are single attempt; a transport error is recorded, not retried.
    """
    start = time.perf_counter()
    try:
        r = await client.request(probe.method, probe.path, json=probe.json, params=probe.params)
    except httpx.HTTPError as e:
        return ProbeResult(
            probe=probe,
            status_code=None,
            elapsed_ms=round((time.perf_counter() - start) * 1000.0, 2),
            error=f"{e.__class__.__name__}: {e}",
        )
    elapsed_ms = round((time.perf_counter() - start) * 1000.0, 2)
    missing = [name for name in UNIFORM_HEADERS if name not in r.headers]
    result = ProbeResult(
        probe=probe,
        status_code=r.status_code,
        elapsed_ms=elapsed_ms,
        missing_headers=missing,
    )
    log = logger.info if result.ok else logger.warning
    log(
        "probe.done",
        extra={
            "event": "probe_done",
            "probe": probe.name,
            "status_code": r.status_code,
            "elapsed_ms": elapsed_ms,
            "ok": result.ok,
        },
    )
    return result


async def run_probes(base_url: str, probes: Iterable[Probe]) -> list[ProbeResult]:
    """Run all probes concurrently against one proxy."""
    async with httpx.AsyncClient(base_url=base_url, timeout=30.0) as client:
        return list(await asyncio.gather(*(run_probe(client, p) for p in probes)))
