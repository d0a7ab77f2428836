from __future__ import annotations

import argparse
import logging
import os

import uvicorn


def main() -> int:
    ap = argparse.ArgumentParser(description="Run the Nexus Security Monitor API and dashboard.")
    ap.add_argument("--host", default=None, help="Bind host (default: SERVER_HOST or 0.0.0.0)")
    ap.add_argument("--port", type=int, default=None, help="Bind port (default: SERVER_PORT or 2022)")
    ap.add_argument("--db", default=None, help="SQLite database path (default: NEXUS_DB_PATH)")
    ap.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    ap.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    args = ap.parse_args()

    # Settings are read from the environment at import time; the reload
    # worker process inherits these too.
    if args.db:
        os.environ["NEXUS_DB_PATH"] = args.db
    if args.log_level:
        os.environ["LOG_LEVEL"] = args.log_level

    from .config import settings

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    host = args.host or settings.server_host
    port = args.port or settings.server_port
    logging.getLogger(__name__).info("Serving on %s:%s (db=%s)", host, port, settings.db_path)

    uvicorn.run(
        "nexusmon.app:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
