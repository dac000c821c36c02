#!/usr/bin/env python3
"""Smoke runner for a deployed proxy.

Steps:
- wait for server health
- send a fixed set of read-only probes concurrently
- check each status and the CORS/no-cache headers
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

from gamehub_proxy.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import run_probes, wait_for_health
from runner.utils import default_probes, summarize

setup_logging()
logger = get_logger("runner")


async def run_smoke(*, base_url: str, timeout_s: float = 20.0, component_type: int = 1) -> int:
    await wait_for_health(base_url, timeout_s)
    results = await run_probes(base_url, default_probes(component_type))
    summary, exit_code = summarize(results)
    logger.info("runner.summary", extra=summary)
    return exit_code


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            timeout_s=args.timeout,
            component_type=args.component_type,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
