from __future__ import annotations

from runner.types import Probe, ProbeResult


def default_probes(component_type: int = 1) -> list[Probe]:
    """Read-only probes that need no real token."""
    return [
        Probe("preflight", "OPTIONS", "/card/getIndexList"),
        Probe("index_list", "GET", "/card/getIndexList", params={"topic_type": 2}),
        Probe("steam_hosts", "GET", "/game/getSteamHost"),
        Probe(
            "component_list",
            "POST",
            "/simulator/v2/getComponentList",
            json={"type": component_type, "page": 1, "page_size": 5},
        ),
        Probe("component_list_bad_type", "POST", "/simulator/v2/getComponentList", json={"type": 99}, expect_status=400),
        Probe("wrong_method", "GET", "/search/getGameList", expect_status=405),
    ]


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    return s[f] * (c - k) + s[c] * (k - f)


def summarize(results: list[ProbeResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from probe outcomes."""
    timings = [r.elapsed_ms for r in results]
    failures = [
        {
            "probe": r.probe.name,
            "expected": r.probe.expect_status,
            "status_code": r.status_code,
            "missing_headers": r.missing_headers,
            "error": r.error,
        }
        for r in results
        if not r.ok
    ]
    summary = {
        "component": "runner",
        "event": "summary",
        "probes": len(results),
        "passed": len(results) - len(failures),
        "failed": len(failures),
        "timings": {
            "p95_ms": round(percentile(timings, 0.95), 2),
            "max_ms": round(max(timings), 2) if timings else 0.0,
        },
        "failures": failures,
    }
    exit_code = 0 if results and not failures else 1
    return summary, exit_code
