"""
Unit tests for the SQLite store
"""

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from nexusmon.storage import (
    db_health,
    format_ts,
    get_counts,
    get_network_activity,
    init_db,
    insert_log_entries,
    insert_log_entry,
    insert_network_activities,
    list_log_entries,
    list_network_activities,
    reset_db,
)


@pytest.mark.unit
class TestSchema:
    """Test table creation and constraints"""

    def test_init_creates_parent_directory(self, temp_db_path):
        """init_db creates missing parent directories"""
        assert not temp_db_path.parent.exists()
        init_db(temp_db_path)
        assert temp_db_path.exists()

    def test_init_is_idempotent(self, db):
        init_db(db)
        assert get_counts(db)["log_entries"] == 0

    def test_rejects_unknown_severity(self, db, base_time):
        """Store refuses severities outside the fixed set"""
        with pytest.raises(sqlite3.IntegrityError):
            insert_log_entry(
                db,
                timestamp=base_time,
                severity="fatal",
                source="x",
                message="y",
                ip_address=None,
                user_agent=None,
                created_at=base_time,
            )

    def test_rejects_out_of_range_latitude(self, db, base_time):
        with pytest.raises(sqlite3.IntegrityError):
            with sqlite3.connect(str(db)) as conn:
                conn.execute(
                    "INSERT INTO network_activities (latitude, longitude, activity_type, title, description,"
                    " ip_address, severity, timestamp, created_at) VALUES (95, 0, 'scan', 't', 'd', '1.1.1.1',"
                    " 'info', ?, ?)",
                    (format_ts(base_time), format_ts(base_time)),
                )

    def test_rejects_invalid_port(self, add_activity, base_time):
        with pytest.raises(sqlite3.IntegrityError):
            add_activity(base_time, port=70000)


@pytest.mark.unit
class TestTimestampFormat:
    """Test the stored timestamp text"""

    def test_naive_is_treated_as_utc(self):
        naive = datetime(2024, 1, 2, 3, 4, 5)
        aware = naive.replace(tzinfo=timezone.utc)
        assert format_ts(naive) == format_ts(aware)

    def test_fixed_width(self):
        a = format_ts(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        b = format_ts(datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc))
        assert len(a) == len(b)
        assert a < b

    def test_other_offsets_are_normalised(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 1, 2, 5, 0, 0, tzinfo=plus_two)
        assert format_ts(value) == "2024-01-02T03:00:00.000000+00:00"


@pytest.mark.unit
class TestLogEntries:
    """Test log entry persistence and querying"""

    def test_insert_assigns_increasing_ids(self, add_log, base_time):
        first = add_log(base_time)
        second = add_log(base_time)
        assert second["id"] > first["id"]

    def test_nullable_fields_round_trip(self, add_log, db, base_time):
        add_log(base_time, ip_address=None, user_agent=None)
        rows = list_log_entries(db)
        assert rows[0]["ip_address"] is None
        assert rows[0]["user_agent"] is None

    def test_newest_first(self, add_log, db, base_time):
        add_log(base_time - timedelta(hours=2), message="old")
        add_log(base_time, message="new")
        add_log(base_time - timedelta(hours=1), message="middle")

        rows = list_log_entries(db)
        assert [r["message"] for r in rows] == ["new", "middle", "old"]

    def test_equal_timestamps_break_ties_by_id(self, add_log, db, base_time):
        ids = [add_log(base_time)["id"] for _ in range(3)]
        rows = list_log_entries(db)
        assert [r["id"] for r in rows] == sorted(ids, reverse=True)

    def test_severity_filter(self, add_log, db, base_time):
        add_log(base_time, severity="error")
        add_log(base_time, severity="info")
        add_log(base_time, severity="error")

        rows = list_log_entries(db, severity="error")
        assert len(rows) == 2
        assert all(r["severity"] == "error" for r in rows)

    def test_since_is_inclusive(self, add_log, db, base_time):
        add_log(base_time - timedelta(hours=2))
        add_log(base_time - timedelta(hours=1))
        add_log(base_time)

        rows = list_log_entries(db, since=base_time - timedelta(hours=1))
        assert len(rows) == 2

    def test_pages_are_disjoint(self, add_log, db, base_time):
        for i in range(10):
            add_log(base_time - timedelta(minutes=i))

        first = list_log_entries(db, limit=4, offset=0)
        second = list_log_entries(db, limit=4, offset=4)
        third = list_log_entries(db, limit=4, offset=8)

        ids = [r["id"] for r in first + second + third]
        assert len(first) == 4 and len(second) == 4 and len(third) == 2
        assert len(set(ids)) == 10

    def test_limit(self, add_log, db, base_time):
        for _ in range(5):
            add_log(base_time)
        assert len(list_log_entries(db, limit=3)) == 3


@pytest.mark.unit
class TestNetworkActivities:
    """Test network activity persistence and querying"""

    def test_metadata_round_trip(self, add_activity, db, base_time):
        row = add_activity(base_time, metadata={"attempts": 5, "protocol": "SSH"})
        fetched = get_network_activity(db, activity_id=row["id"])
        assert fetched["metadata"] == {"attempts": 5, "protocol": "SSH"}

    def test_absent_metadata_is_none(self, add_activity, db, base_time):
        row = add_activity(base_time, metadata=None)
        assert get_network_activity(db, activity_id=row["id"])["metadata"] is None

    def test_missing_id_returns_none(self, db):
        assert get_network_activity(db, activity_id=999) is None

    def test_filters_combine(self, add_activity, db, base_time):
        add_activity(base_time, activity_type="scan", severity="info")
        add_activity(base_time, activity_type="scan", severity="critical")
        add_activity(base_time, activity_type="breach", severity="critical")

        rows = list_network_activities(db, activity_type="scan", severity="critical")
        assert len(rows) == 1
        assert rows[0]["activity_type"] == "scan"
        assert rows[0]["severity"] == "critical"

    def test_no_limit_returns_everything(self, add_activity, db, base_time):
        for i in range(120):
            add_activity(base_time - timedelta(seconds=i))
        assert len(list_network_activities(db)) == 120

    def test_since_is_inclusive(self, add_activity, db, base_time):
        add_activity(base_time - timedelta(seconds=1))
        at_bound = add_activity(base_time)
        after = add_activity(base_time + timedelta(hours=1))

        rows = list_network_activities(db, since=base_time)
        assert [r["id"] for r in rows] == [after["id"], at_bound["id"]]

    def test_since_combines_with_type_and_severity(self, add_activity, db, base_time):
        add_activity(base_time - timedelta(hours=1), activity_type="scan", severity="error")
        match = add_activity(base_time, activity_type="scan", severity="error")
        add_activity(base_time, activity_type="scan", severity="info")
        add_activity(base_time, activity_type="breach", severity="error")

        rows = list_network_activities(db, activity_type="scan", severity="error", since=base_time)
        assert [r["id"] for r in rows] == [match["id"]]

    def test_newest_first(self, add_activity, db, base_time):
        old = add_activity(base_time - timedelta(days=1))
        new = add_activity(base_time)
        rows = list_network_activities(db)
        assert [r["id"] for r in rows] == [new["id"], old["id"]]


@pytest.mark.unit
class TestBatchInserts:
    """Test batch inserts run in a single transaction"""

    def _log(self, base_time, severity="info"):
        return {"timestamp": base_time, "severity": severity, "source": "s", "message": "m"}

    def test_batch_returns_stored_rows(self, db, base_time):
        rows = insert_log_entries(db, [self._log(base_time) for _ in range(3)], created_at=base_time)
        assert [r["id"] for r in rows] == [1, 2, 3]
        assert get_counts(db)["log_entries"] == 3

    def test_failed_log_batch_stores_nothing(self, db, base_time):
        batch = [self._log(base_time), self._log(base_time), self._log(base_time, severity="fatal")]
        with pytest.raises(sqlite3.IntegrityError):
            insert_log_entries(db, batch, created_at=base_time)
        assert get_counts(db)["log_entries"] == 0

    def test_failed_activity_batch_stores_nothing(self, db, base_time):
        good = {
            "latitude": 10.0,
            "longitude": 20.0,
            "activity_type": "scan",
            "title": "Port Scan Detected",
            "description": "d",
            "ip_address": "10.0.0.1",
            "severity": "info",
            "timestamp": base_time,
        }
        bad = dict(good, port=0)
        with pytest.raises(sqlite3.IntegrityError):
            insert_network_activities(db, [good, good, bad], created_at=base_time)
        assert get_counts(db)["network_activities"] == 0


@pytest.mark.unit
class TestCountersAndReset:
    """Test aggregate counters, health and reset"""

    def test_threats_blocked(self, add_activity, db, base_time):
        add_activity(base_time, activity_type="firewall")
        add_activity(base_time, activity_type="scan", metadata={"blocked": True})
        add_activity(base_time, activity_type="scan", metadata={"blocked": False})
        add_activity(base_time, activity_type="connection")

        counts = get_counts(db)
        assert counts["network_activities"] == 4
        assert counts["threats_blocked"] == 2

    def test_reset_restarts_ids(self, add_log, db, base_time):
        add_log(base_time)
        add_log(base_time)
        reset_db(db)

        assert get_counts(db)["log_entries"] == 0
        assert add_log(base_time)["id"] == 1

    def test_health_ok(self, add_log, db, base_time):
        add_log(base_time)
        health = db_health(db)
        assert health["ok"] is True
        assert health["log_entries"] == 1

    def test_health_reports_missing_schema(self, tmp_path):
        health = db_health(tmp_path / "empty.sqlite3")
        assert health["ok"] is False
        assert "no such table" in health["error"]
