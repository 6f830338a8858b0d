"""
Run the Temerio account service with uvicorn.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from temerio.config import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Temerio account service")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on source changes (development only)",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )
    if settings.use_in_memory_backends:
        logger.warning("Using in-memory backends; data is lost on restart")

    logger.info("Serving on %s:%d%s", args.host, args.port, settings.api_prefix)
    uvicorn.run(
        "temerio.app:app",
        host=args.host,
        port=max(1, min(args.port, 65535)),
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
