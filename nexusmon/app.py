from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from . import handlers
from .config import settings
from .models import (
    ActivityType,
    DummyBatchIn,
    HealthcheckOut,
    LogEntryCreateIn,
    LogEntryOut,
    LogQueryIn,
    NetworkActivityCreateIn,
    NetworkActivityOut,
    NetworkActivityQueryIn,
    Severity,
    SystemStatsOut,
    now_utc,
)
from .stats import collect_system_stats
from .storage import db_health, init_db
from .web import render_index


logger = logging.getLogger(__name__)

DB_PATH = Path(settings.db_path)

app = FastAPI(title="Nexus Security Monitor", version=settings.app_version)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


# Every procedure lives under one prefix: queries are GET with query-string
# input, mutations are POST with a JSON body.
rpc = APIRouter(prefix="/rpc", tags=["rpc"])


@rpc.get("/healthcheck", response_model=HealthcheckOut)
def healthcheck() -> HealthcheckOut:
    return HealthcheckOut(status="ok", timestamp=now_utc())


@rpc.post("/createLogEntry", response_model=LogEntryOut)
def create_log_entry(payload: LogEntryCreateIn) -> LogEntryOut:
    return handlers.create_log_entry(DB_PATH, payload)


@rpc.get("/getLogEntries", response_model=List[LogEntryOut])
def get_log_entries(
    severity: Optional[Severity] = Query(default=None),
    since: Optional[datetime] = Query(default=None),
    limit: Optional[int] = Query(default=None, gt=0),
    offset: Optional[int] = Query(default=None, ge=0),
) -> List[LogEntryOut]:
    params = LogQueryIn(severity=severity, since=since, limit=limit, offset=offset)
    return handlers.get_log_entries(DB_PATH, params)


@rpc.post("/createNetworkActivity", response_model=NetworkActivityOut)
def create_network_activity(payload: NetworkActivityCreateIn) -> NetworkActivityOut:
    return handlers.create_network_activity(DB_PATH, payload)


@rpc.get("/getNetworkActivities", response_model=List[NetworkActivityOut])
def get_network_activities(
    activity_type: Optional[ActivityType] = Query(default=None),
    severity: Optional[Severity] = Query(default=None),
    since: Optional[datetime] = Query(default=None),
    limit: Optional[int] = Query(default=None, gt=0),
) -> List[NetworkActivityOut]:
    params = NetworkActivityQueryIn(activity_type=activity_type, severity=severity, since=since, limit=limit)
    return handlers.get_network_activities(DB_PATH, params)


@rpc.get("/getNetworkActivityById", response_model=Optional[NetworkActivityOut])
def get_network_activity_by_id(id: int = Query(gt=0)) -> Optional[NetworkActivityOut]:
    return handlers.get_network_activity_by_id(DB_PATH, id)


@rpc.post("/generateDummyLogEntries", response_model=List[LogEntryOut])
def generate_dummy_log_entries(payload: Optional[DummyBatchIn] = None) -> List[LogEntryOut]:
    payload = payload or DummyBatchIn()
    return handlers.generate_dummy_log_entries(DB_PATH, payload.count, persist=payload.persist)


@rpc.post("/generateDummyNetworkActivities", response_model=List[NetworkActivityOut])
def generate_dummy_network_activities(payload: Optional[DummyBatchIn] = None) -> List[NetworkActivityOut]:
    payload = payload or DummyBatchIn()
    return handlers.generate_dummy_network_activities(DB_PATH, payload.count, persist=payload.persist)


@rpc.post("/streamRandomLogEntry", response_model=LogEntryOut)
def stream_random_log_entry() -> LogEntryOut:
    return handlers.stream_random_log_entry()


@rpc.get("/getSystemStats", response_model=SystemStatsOut)
def get_system_stats() -> SystemStatsOut:
    return collect_system_stats(DB_PATH)


app.include_router(rpc)


@app.on_event("startup")
def _startup() -> None:
    init_db(DB_PATH)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    activities = handlers.get_network_activities(DB_PATH, NetworkActivityQueryIn(limit=50))
    logs = handlers.get_log_entries(DB_PATH, LogQueryIn(limit=100))
    return render_index(
        activities=[a.model_dump(mode="json") for a in activities],
        logs=[e.model_dump(mode="json") for e in logs],
    )


@app.get("/health")
def health() -> Dict[str, Any]:
    return db_health(DB_PATH)
