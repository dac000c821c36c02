from __future__ import annotations

import argparse
import os


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the proxy smoke runner."""
    parser = argparse.ArgumentParser(description="GameHub proxy smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument("--timeout", type=float, default=20.0, help="seconds to wait for /health")
    parser.add_argument(
        "--component-type",
        type=int,
        default=1,
        dest="component_type",
        help="manifest type probed through getComponentList (1-7)",
    )
    return parser.parse_args(argv)
