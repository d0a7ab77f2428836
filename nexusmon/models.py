from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, Field

from .config import settings


Severity = Literal["info", "warning", "error", "debug", "critical"]
ActivityType = Literal["intrusion", "firewall", "connection", "scan", "breach", "traffic"]

SEVERITIES: Tuple[str, ...] = get_args(Severity)
ACTIVITY_TYPES: Tuple[str, ...] = get_args(ActivityType)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class LogEntryCreateIn(BaseModel):
    severity: Severity
    source: str
    message: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class LogEntryOut(BaseModel):
    id: int
    timestamp: datetime
    severity: Severity
    source: str
    message: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime


class LogQueryIn(BaseModel):
    limit: Optional[int] = Field(default=None, gt=0)
    offset: Optional[int] = Field(default=None, ge=0)
    severity: Optional[Severity] = None
    since: Optional[datetime] = Field(default=None, description="Inclusive lower bound on the event timestamp")


class NetworkActivityCreateIn(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    activity_type: ActivityType
    title: str
    description: str
    ip_address: str
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    country: Optional[str] = None
    city: Optional[str] = None
    severity: Severity
    metadata: Optional[Dict[str, Any]] = None


class NetworkActivityOut(BaseModel):
    id: int
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    activity_type: ActivityType
    title: str
    description: str
    ip_address: str
    port: Optional[int] = None
    country: Optional[str] = None
    city: Optional[str] = None
    severity: Severity
    timestamp: datetime
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime


class NetworkActivityQueryIn(BaseModel):
    limit: Optional[int] = Field(default=None, gt=0)
    activity_type: Optional[ActivityType] = None
    severity: Optional[Severity] = None
    since: Optional[datetime] = None


class DummyBatchIn(BaseModel):
    count: Optional[int] = Field(default=None, gt=0, le=settings.dummy_max_count)
    persist: bool = Field(default=False, description="Also write the generated rows to the store")


class HealthcheckOut(BaseModel):
    status: str
    timestamp: datetime


class SystemStatsOut(BaseModel):
    cpu_percent: float
    memory_percent: float
    bytes_sent: int
    bytes_recv: int
    load_1m: Optional[float] = None
    log_entries: int
    network_activities: int
    threats_blocked: int
    server_time: datetime
