from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .models import ACTIVITY_TYPES, SEVERITIES


logger = logging.getLogger(__name__)


def _sql_in(values) -> str:
    return ", ".join(f"'{v}'" for v in values)


_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS log_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    severity TEXT NOT NULL CHECK (severity IN ({_sql_in(SEVERITIES)})),
    source TEXT NOT NULL,
    message TEXT NOT NULL,
    ip_address TEXT,
    user_agent TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_log_entries_timestamp ON log_entries(timestamp);
CREATE INDEX IF NOT EXISTS idx_log_entries_severity ON log_entries(severity);

CREATE TABLE IF NOT EXISTS network_activities (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    latitude REAL NOT NULL CHECK (latitude BETWEEN -90 AND 90),
    longitude REAL NOT NULL CHECK (longitude BETWEEN -180 AND 180),
    activity_type TEXT NOT NULL CHECK (activity_type IN ({_sql_in(ACTIVITY_TYPES)})),
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    ip_address TEXT NOT NULL,
    port INTEGER CHECK (port IS NULL OR port BETWEEN 1 AND 65535),
    country TEXT,
    city TEXT,
    severity TEXT NOT NULL CHECK (severity IN ({_sql_in(SEVERITIES)})),
    timestamp TEXT NOT NULL,
    metadata_json TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_network_activities_timestamp ON network_activities(timestamp);
CREATE INDEX IF NOT EXISTS idx_network_activities_type ON network_activities(activity_type);
CREATE INDEX IF NOT EXISTS idx_network_activities_severity ON network_activities(severity);
"""


def format_ts(value: datetime) -> str:
    """Render a datetime as fixed-width UTC ISO text.

    Naive datetimes are taken to be UTC. The fixed width keeps lexical and
    chronological order identical, which the ORDER BY / >= filters rely on.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


@contextmanager
def _connection(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode=WAL")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with _connection(db_path) as conn:
        conn.executescript(_SCHEMA)
    logger.info("Database ready at %s", db_path)


def reset_db(db_path: Path) -> None:
    """Truncate both tables and restart their id sequences."""
    with _connection(db_path) as conn:
        conn.execute("DELETE FROM log_entries")
        conn.execute("DELETE FROM network_activities")
        conn.execute(
            "DELETE FROM sqlite_sequence WHERE name IN ('log_entries', 'network_activities')"
        )


def _log_entry_row(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "timestamp": _parse_ts(row["timestamp"]),
        "severity": row["severity"],
        "source": row["source"],
        "message": row["message"],
        "ip_address": row["ip_address"],
        "user_agent": row["user_agent"],
        "created_at": _parse_ts(row["created_at"]),
    }


def _network_activity_row(row: sqlite3.Row) -> Dict[str, Any]:
    raw_meta = row["metadata_json"]
    return {
        "id": row["id"],
        "latitude": float(row["latitude"]),
        "longitude": float(row["longitude"]),
        "activity_type": row["activity_type"],
        "title": row["title"],
        "description": row["description"],
        "ip_address": row["ip_address"],
        "port": row["port"],
        "country": row["country"],
        "city": row["city"],
        "severity": row["severity"],
        "timestamp": _parse_ts(row["timestamp"]),
        "metadata": json.loads(raw_meta) if raw_meta is not None else None,
        "created_at": _parse_ts(row["created_at"]),
    }


# --- Log entries ---


def _insert_log_entry(conn: sqlite3.Connection, fields: Dict[str, Any], created_at: datetime) -> Dict[str, Any]:
    cur = conn.execute(
        """
        INSERT INTO log_entries (timestamp, severity, source, message, ip_address, user_agent, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            format_ts(fields["timestamp"]),
            fields["severity"],
            fields["source"],
            fields["message"],
            fields.get("ip_address"),
            fields.get("user_agent"),
            format_ts(created_at),
        ),
    )
    row = conn.execute("SELECT * FROM log_entries WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _log_entry_row(row)


def insert_log_entry(
    db_path: Path,
    *,
    timestamp: datetime,
    severity: str,
    source: str,
    message: str,
    ip_address: Optional[str],
    user_agent: Optional[str],
    created_at: datetime,
) -> Dict[str, Any]:
    fields = {
        "timestamp": timestamp,
        "severity": severity,
        "source": source,
        "message": message,
        "ip_address": ip_address,
        "user_agent": user_agent,
    }
    with _connection(db_path) as conn:
        return _insert_log_entry(conn, fields, created_at)


def insert_log_entries(
    db_path: Path, entries: Iterable[Dict[str, Any]], *, created_at: datetime
) -> List[Dict[str, Any]]:
    """Insert a batch in one transaction; a failing row rolls back the whole batch."""
    with _connection(db_path) as conn:
        return [_insert_log_entry(conn, e, created_at) for e in entries]


def list_log_entries(
    db_path: Path,
    *,
    severity: Optional[str] = None,
    since: Optional[datetime] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    where: List[str] = []
    args: List[Any] = []

    if severity is not None:
        where.append("severity = ?")
        args.append(severity)

    if since is not None:
        where.append("timestamp >= ?")
        args.append(format_ts(since))

    where_sql = (" WHERE " + " AND ".join(where)) if where else ""

    with _connection(db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM log_entries" + where_sql + " ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?",
            (*args, limit, offset),
        ).fetchall()

    return [_log_entry_row(r) for r in rows]


# --- Network activities ---


def _insert_network_activity(
    conn: sqlite3.Connection, fields: Dict[str, Any], created_at: datetime
) -> Dict[str, Any]:
    metadata = fields.get("metadata")
    cur = conn.execute(
        """
        INSERT INTO network_activities (
            latitude, longitude, activity_type, title, description, ip_address,
            port, country, city, severity, timestamp, metadata_json, created_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            float(fields["latitude"]),
            float(fields["longitude"]),
            fields["activity_type"],
            fields["title"],
            fields["description"],
            fields["ip_address"],
            fields.get("port"),
            fields.get("country"),
            fields.get("city"),
            fields["severity"],
            format_ts(fields["timestamp"]),
            json.dumps(metadata) if metadata is not None else None,
            format_ts(created_at),
        ),
    )
    row = conn.execute("SELECT * FROM network_activities WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _network_activity_row(row)


def insert_network_activity(
    db_path: Path,
    *,
    latitude: float,
    longitude: float,
    activity_type: str,
    title: str,
    description: str,
    ip_address: str,
    port: Optional[int],
    country: Optional[str],
    city: Optional[str],
    severity: str,
    timestamp: datetime,
    metadata: Optional[Dict[str, Any]],
    created_at: datetime,
) -> Dict[str, Any]:
    fields = {
        "latitude": latitude,
        "longitude": longitude,
        "activity_type": activity_type,
        "title": title,
        "description": description,
        "ip_address": ip_address,
        "port": port,
        "country": country,
        "city": city,
        "severity": severity,
        "timestamp": timestamp,
        "metadata": metadata,
    }
    with _connection(db_path) as conn:
        return _insert_network_activity(conn, fields, created_at)


def insert_network_activities(
    db_path: Path, activities: Iterable[Dict[str, Any]], *, created_at: datetime
) -> List[Dict[str, Any]]:
    with _connection(db_path) as conn:
        return [_insert_network_activity(conn, a, created_at) for a in activities]


def list_network_activities(
    db_path: Path,
    *,
    activity_type: Optional[str] = None,
    severity: Optional[str] = None,
    since: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    where: List[str] = []
    args: List[Any] = []

    if activity_type is not None:
        where.append("activity_type = ?")
        args.append(activity_type)

    if severity is not None:
        where.append("severity = ?")
        args.append(severity)

    if since is not None:
        where.append("timestamp >= ?")
        args.append(format_ts(since))

    sql = "SELECT * FROM network_activities"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY timestamp DESC, id DESC"
    if limit is not None:
        sql += " LIMIT ?"
        args.append(limit)

    with _connection(db_path) as conn:
        rows = conn.execute(sql, args).fetchall()

    return [_network_activity_row(r) for r in rows]


def get_network_activity(db_path: Path, *, activity_id: int) -> Optional[Dict[str, Any]]:
    with _connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM network_activities WHERE id = ? LIMIT 1", (activity_id,)
        ).fetchone()
    if row is None:
        return None
    return _network_activity_row(row)


# --- Counters ---


def get_counts(db_path: Path) -> Dict[str, int]:
    with _connection(db_path) as conn:
        logs = conn.execute("SELECT COUNT(1) AS n FROM log_entries").fetchone()
        acts = conn.execute("SELECT COUNT(1) AS n FROM network_activities").fetchone()
        blocked = conn.execute(
            """
            SELECT COUNT(1) AS n FROM network_activities
            WHERE activity_type = 'firewall'
               OR json_extract(metadata_json, '$.blocked') = 1
            """
        ).fetchone()
    return {
        "log_entries": int(logs["n"]),
        "network_activities": int(acts["n"]),
        "threats_blocked": int(blocked["n"]),
    }


def db_health(db_path: Path) -> Dict[str, Any]:
    """Lightweight DB check used by /health."""
    try:
        counts = get_counts(db_path)
    except sqlite3.Error as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True, "log_entries": counts["log_entries"], "network_activities": counts["network_activities"]}
