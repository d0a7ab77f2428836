from __future__ import annotations

import logging
import random
import sqlite3
from pathlib import Path
from typing import List, Optional

from . import dummy
from .config import settings
from .models import (
    LogEntryCreateIn,
    LogEntryOut,
    LogQueryIn,
    NetworkActivityCreateIn,
    NetworkActivityOut,
    NetworkActivityQueryIn,
    now_utc,
)
from .storage import (
    get_network_activity,
    insert_log_entries,
    insert_log_entry,
    insert_network_activities,
    insert_network_activity,
    list_log_entries,
    list_network_activities,
)


logger = logging.getLogger(__name__)


def create_log_entry(db_path: Path, payload: LogEntryCreateIn) -> LogEntryOut:
    now = now_utc()
    try:
        row = insert_log_entry(
            db_path,
            timestamp=now,
            severity=payload.severity,
            source=payload.source,
            message=payload.message,
            ip_address=payload.ip_address,
            user_agent=payload.user_agent,
            created_at=now,
        )
    except sqlite3.Error:
        logger.exception("Log entry creation failed")
        raise
    logger.debug("Created log entry %s (%s from %s)", row["id"], row["severity"], row["source"])
    return LogEntryOut(**row)


def get_log_entries(db_path: Path, params: Optional[LogQueryIn] = None) -> List[LogEntryOut]:
    params = params or LogQueryIn()
    try:
        rows = list_log_entries(
            db_path,
            severity=params.severity,
            since=params.since,
            limit=params.limit if params.limit is not None else settings.log_query_default_limit,
            offset=params.offset or 0,
        )
    except sqlite3.Error:
        logger.exception("Failed to fetch log entries")
        raise
    return [LogEntryOut(**r) for r in rows]


def create_network_activity(db_path: Path, payload: NetworkActivityCreateIn) -> NetworkActivityOut:
    now = now_utc()
    try:
        row = insert_network_activity(
            db_path,
            latitude=payload.latitude,
            longitude=payload.longitude,
            activity_type=payload.activity_type,
            title=payload.title,
            description=payload.description,
            ip_address=payload.ip_address,
            port=payload.port,
            country=payload.country,
            city=payload.city,
            severity=payload.severity,
            timestamp=now,
            metadata=payload.metadata,
            created_at=now,
        )
    except sqlite3.Error:
        logger.exception("Network activity creation failed")
        raise
    logger.debug("Created network activity %s (%s)", row["id"], row["activity_type"])
    return NetworkActivityOut(**row)


def get_network_activities(
    db_path: Path, params: Optional[NetworkActivityQueryIn] = None
) -> List[NetworkActivityOut]:
    params = params or NetworkActivityQueryIn()
    try:
        rows = list_network_activities(
            db_path,
            activity_type=params.activity_type,
            severity=params.severity,
            since=params.since,
            limit=params.limit,
        )
    except sqlite3.Error:
        logger.exception("Failed to fetch network activities")
        raise
    return [NetworkActivityOut(**r) for r in rows]


def get_network_activity_by_id(db_path: Path, activity_id: int) -> Optional[NetworkActivityOut]:
    try:
        row = get_network_activity(db_path, activity_id=activity_id)
    except sqlite3.Error:
        logger.exception("Network activity fetch failed")
        raise
    if row is None:
        return None
    return NetworkActivityOut(**row)


# --- Dummy data ---


def generate_dummy_log_entries(
    db_path: Path,
    count: Optional[int] = None,
    *,
    persist: bool = False,
    rng: Optional[random.Random] = None,
) -> List[LogEntryOut]:
    """Fabricate log entries; with `persist` they are also written to the store.

    Persisted rows keep their fabricated event timestamps but receive
    store-assigned ids and a real creation time. The batch is written in one
    transaction, so a failure stores nothing.
    """
    rows = dummy.generate_log_entries(50 if count is None else count, rng=rng)
    if not persist:
        return [LogEntryOut(**r) for r in rows]

    try:
        saved = insert_log_entries(db_path, rows, created_at=now_utc())
    except sqlite3.Error:
        logger.exception("Persisting %d dummy log entries failed", len(rows))
        raise
    logger.info("Persisted %d dummy log entries", len(saved))
    return [LogEntryOut(**r) for r in saved]


def generate_dummy_network_activities(
    db_path: Path,
    count: Optional[int] = None,
    *,
    persist: bool = False,
    rng: Optional[random.Random] = None,
) -> List[NetworkActivityOut]:
    rows = dummy.generate_network_activities(100 if count is None else count, rng=rng)
    if not persist:
        return [NetworkActivityOut(**r) for r in rows]

    try:
        saved = insert_network_activities(db_path, rows, created_at=now_utc())
    except sqlite3.Error:
        logger.exception("Persisting %d dummy network activities failed", len(rows))
        raise
    logger.info("Persisted %d dummy network activities", len(saved))
    return [NetworkActivityOut(**r) for r in saved]


def stream_random_log_entry(*, rng: Optional[random.Random] = None) -> LogEntryOut:
    return LogEntryOut(**dummy.random_log_entry(rng=rng))
