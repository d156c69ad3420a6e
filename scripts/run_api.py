#!/usr/bin/env python3
"""Run the Storybook Generator API with uvicorn.

Usage:
    python scripts/run_api.py --port 8080 --no-reload
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from storybook.api.config import LOG_LEVEL


def parse_args():
    parser = argparse.ArgumentParser(description="Run the Storybook Generator API")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        help="Disable auto-reload (enabled by default for development)",
    )
    return parser.parse_args()


def main(host: str, port: int, reload: bool):
    uvicorn.run(
        "storybook.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    args = parse_args()
    main(args.host, args.port, args.reload)
