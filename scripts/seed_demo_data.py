#!/usr/bin/env python3

from __future__ import annotations

import argparse
import random
import time
from typing import Any, Dict

import httpx


def _persist_streamed_entry(client: httpx.Client, base: str) -> Dict[str, Any]:
    resp = client.post(f"{base}/rpc/streamRandomLogEntry")
    resp.raise_for_status()
    entry = resp.json()
    resp = client.post(
        f"{base}/rpc/createLogEntry",
        json={
            "severity": entry["severity"],
            "source": entry["source"],
            "message": entry["message"],
            "ip_address": entry.get("ip_address"),
            "user_agent": entry.get("user_agent"),
        },
    )
    resp.raise_for_status()
    return resp.json()


def main() -> int:
    ap = argparse.ArgumentParser(description="Fill a running Nexus server with persisted demo data.")
    ap.add_argument("--url", default="http://127.0.0.1:2022", help="Server base URL")
    ap.add_argument("--logs", type=int, default=50, help="Number of demo log entries")
    ap.add_argument("--activities", type=int, default=100, help="Number of demo network activities")
    ap.add_argument(
        "--stream-seconds",
        type=int,
        default=0,
        help="Afterwards keep adding one live log entry every 2-5s for this many seconds",
    )
    args = ap.parse_args()

    base = args.url.rstrip("/")
    with httpx.Client(timeout=10.0) as client:
        resp = client.get(f"{base}/rpc/healthcheck")
        resp.raise_for_status()

        if args.logs > 0:
            resp = client.post(f"{base}/rpc/generateDummyLogEntries", json={"count": args.logs, "persist": True})
            resp.raise_for_status()
            print(f"stored {len(resp.json())} log entries")

        if args.activities > 0:
            resp = client.post(
                f"{base}/rpc/generateDummyNetworkActivities",
                json={"count": args.activities, "persist": True},
            )
            resp.raise_for_status()
            print(f"stored {len(resp.json())} network activities")

        deadline = time.monotonic() + args.stream_seconds
        while time.monotonic() < deadline:
            try:
                entry = _persist_streamed_entry(client, base)
                print(f"[{entry['severity']}] {entry['source']}: {entry['message']}")
            except httpx.HTTPError as e:
                # Keep streaming through transient failures.
                print(f"send failed: {e}")
            time.sleep(random.uniform(2.0, 5.0))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
