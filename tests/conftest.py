"""
Pytest configuration and fixtures for Nexus tests
Provides a throwaway SQLite database per test and an API client bound to it
"""

import random
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from nexusmon import app as app_module
from nexusmon.storage import init_db, insert_log_entry, insert_network_activity


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def temp_db_path(tmp_path):
    """Path for a database file that does not exist yet"""
    return tmp_path / "data" / "test.sqlite3"


@pytest.fixture
def db(temp_db_path):
    """Initialised empty database"""
    init_db(temp_db_path)
    yield temp_db_path


@pytest.fixture
def rng():
    """Seeded random source so generator tests are repeatable"""
    return random.Random(1234)


@pytest.fixture
def base_time():
    """Fixed reference instant for timestamp-ordering tests"""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# ROW FACTORIES
# ============================================================================


@pytest.fixture
def add_log(db):
    """Insert a log entry with an explicit event timestamp"""

    def _add(timestamp, severity="info", source="test-source", message="Test log message",
             ip_address=None, user_agent=None):
        return insert_log_entry(
            db,
            timestamp=timestamp,
            severity=severity,
            source=source,
            message=message,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=datetime.now(timezone.utc),
        )

    return _add


@pytest.fixture
def add_activity(db):
    """Insert a network activity with an explicit event timestamp"""

    def _add(timestamp, activity_type="intrusion", severity="warning", metadata=None, port=22):
        return insert_network_activity(
            db,
            latitude=37.7749,
            longitude=-122.4194,
            activity_type=activity_type,
            title="Suspicious Access Attempt",
            description="Multiple failed login attempts detected from this IP",
            ip_address="192.168.1.100",
            port=port,
            country="United States",
            city="San Francisco",
            severity=severity,
            timestamp=timestamp,
            metadata=metadata,
            created_at=datetime.now(timezone.utc),
        )

    return _add


@pytest.fixture
def sample_activity_payload():
    return {
        "latitude": 37.7749,
        "longitude": -122.4194,
        "activity_type": "intrusion",
        "title": "Suspicious Access Attempt",
        "description": "Multiple failed login attempts detected from this IP",
        "ip_address": "192.168.1.100",
        "port": 22,
        "country": "United States",
        "city": "San Francisco",
        "severity": "warning",
        "metadata": {"attempts": 5, "protocol": "SSH"},
    }


# ============================================================================
# API FIXTURES
# ============================================================================


@pytest.fixture
def client(db, monkeypatch):
    """FastAPI test client whose routes use the temporary database"""
    monkeypatch.setattr(app_module, "DB_PATH", db)
    with TestClient(app_module.app) as test_client:
        yield test_client
