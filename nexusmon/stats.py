from __future__ import annotations

from pathlib import Path
from typing import Optional

import psutil

from .models import SystemStatsOut, now_utc
from .storage import get_counts


def _safe_load_1m() -> Optional[float]:
    try:
        l1, _, _ = psutil.getloadavg()
    except (AttributeError, OSError):
        return None
    return float(l1)


def collect_system_stats(db_path: Path) -> SystemStatsOut:
    """Host figures for the dashboard header plus store counters."""
    net = psutil.net_io_counters()
    counts = get_counts(db_path)
    return SystemStatsOut(
        cpu_percent=float(psutil.cpu_percent(interval=None)),
        memory_percent=float(psutil.virtual_memory().percent),
        bytes_sent=int(net.bytes_sent) if net else 0,
        bytes_recv=int(net.bytes_recv) if net else 0,
        load_1m=_safe_load_1m(),
        log_entries=counts["log_entries"],
        network_activities=counts["network_activities"],
        threats_blocked=counts["threats_blocked"],
        server_time=now_utc(),
    )
