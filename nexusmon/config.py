from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Tuple

from dotenv import load_dotenv


# Local `.env` values never override variables already set in the environment.
load_dotenv(override=False)


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _get_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip()


def _get_csv(name: str, default: str) -> Tuple[str, ...]:
    parts = [p.strip() for p in _get_str(name, default).split(",")]
    return tuple(p for p in parts if p)


@dataclass(frozen=True)
class Settings:
    # App metadata
    app_version: str = _get_str("APP_VERSION", "dev")

    # SQLite persistence
    db_path: str = _get_str("NEXUS_DB_PATH", "data/nexus.sqlite3")

    # HTTP server
    server_host: str = _get_str("SERVER_HOST", "0.0.0.0")
    server_port: int = _get_int("SERVER_PORT", 2022)
    log_level: str = _get_str("LOG_LEVEL", "INFO").upper()

    # Empty disables CORS entirely; "*" allows any origin.
    cors_allow_origins: Tuple[str, ...] = _get_csv("CORS_ALLOW_ORIGINS", "*")

    # Query / generator limits
    log_query_default_limit: int = _get_int("LOG_QUERY_DEFAULT_LIMIT", 50)
    dummy_max_count: int = _get_int("DUMMY_MAX_COUNT", 1000)


settings = Settings()
