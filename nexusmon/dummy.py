"""Fabricated log entries and network activities for demo mode."""

from __future__ import annotations

import random
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .models import ACTIVITY_TYPES, SEVERITIES


SOURCES = [
    "auth-service", "firewall", "nginx", "database", "api-gateway",
    "load-balancer", "cache-server", "monitoring", "backup-system", "cdn",
]

LOG_MESSAGES = {
    "info": [
        "User login successful",
        "System backup completed",
        "Cache cleared successfully",
        "API request processed",
        "Database connection established",
        "Service health check passed",
        "Configuration updated",
        "Session created",
    ],
    "warning": [
        "High memory usage detected",
        "Slow database query",
        "Connection pool near capacity",
        "Rate limit approaching",
        "Disk space running low",
        "SSL certificate expires soon",
        "Failed login attempt",
        "Unusual traffic pattern",
    ],
    "error": [
        "Database connection failed",
        "Authentication service unavailable",
        "File upload failed",
        "Payment processing error",
        "External API timeout",
        "Memory allocation failed",
        "Configuration file corrupted",
        "Service crash detected",
    ],
    "debug": [
        "Query execution time: 125ms",
        "Cache hit ratio: 94%",
        "Request validation passed",
        "Environment variable loaded",
        "Thread pool status: active",
        "Network latency: 45ms",
        "Memory usage: 67%",
        "CPU utilization: 23%",
    ],
    "critical": [
        "System security breach detected",
        "Data corruption found",
        "Service completely unavailable",
        "Multiple system failures",
        "Disk failure imminent",
        "Network infrastructure down",
        "Critical vulnerability exploited",
        "Emergency shutdown initiated",
    ],
}

ACTIVITY_TITLES = {
    "intrusion": ["Unauthorized Access Attempt", "Brute Force Attack", "SQL Injection Detected", "Cross-Site Scripting"],
    "firewall": ["Blocked Connection", "Port Scan Blocked", "Malicious IP Filtered", "Geographic Restriction"],
    "connection": ["New Connection", "VPN Connection", "Proxy Connection", "Direct Connection"],
    "scan": ["Port Scan Detected", "Vulnerability Scan", "Network Discovery", "Service Enumeration"],
    "breach": ["Data Exfiltration", "Credential Theft", "System Compromise", "Malware Detected"],
    "traffic": ["High Traffic Volume", "DDoS Attack", "Bandwidth Spike", "Load Balancing"],
}

DESCRIPTION_SUFFIXES = [
    "Automated threat detected.",
    "Manual investigation required.",
    "Pattern matches known attack signature.",
    "Geolocation-based security rule triggered.",
    "Suspicious behavior analysis completed.",
]

# (country, city, latitude, longitude)
HOTSPOTS = [
    ("United States", "New York", 40.7128, -74.0060),
    ("United States", "San Francisco", 37.7749, -122.4194),
    ("United Kingdom", "London", 51.5074, -0.1278),
    ("France", "Paris", 48.8566, 2.3522),
    ("Japan", "Tokyo", 35.6762, 139.6503),
    ("Russia", "Moscow", 55.7558, 37.6176),
    ("China", "Beijing", 39.9042, 116.4074),
    ("Brazil", "São Paulo", -23.5505, -46.6333),
    ("India", "Mumbai", 19.0760, 72.8777),
    ("Germany", "Berlin", 52.5200, 13.4050),
    ("Canada", "Toronto", 43.6532, -79.3832),
    ("Australia", "Sydney", -33.8688, 151.2093),
    ("South Korea", "Seoul", 37.5665, 126.9780),
    ("Netherlands", "Amsterdam", 52.3676, 4.9041),
    ("Sweden", "Stockholm", 59.3293, 18.0686),
]

LAT_JITTER = 5.0
LNG_JITTER = 10.0

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_7_1 like Mac OS X)",
    "Mozilla/5.0 (Android 11; Mobile; rv:91.0) Gecko/91.0",
    "curl/7.68.0",
    "python-requests/2.31.0",
]

PROTOCOLS = ["TCP", "UDP", "HTTP", "HTTPS", "SSH", "FTP"]

LOG_HOURS_BACK = 72
ACTIVITY_HOURS_BACK = 48


def _random_ip(rng: random.Random) -> str:
    return ".".join(
        str(octet)
        for octet in (rng.randint(1, 255), rng.randint(0, 255), rng.randint(0, 255), rng.randint(1, 255))
    )


def _random_past(rng: random.Random, now: datetime, hours_back: int) -> datetime:
    return now - timedelta(seconds=rng.random() * hours_back * 3600)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _fabricate_log_entry(rng: random.Random, *, entry_id: int, timestamp: datetime) -> Dict[str, Any]:
    severity = rng.choice(SEVERITIES)
    return {
        "id": entry_id,
        "timestamp": timestamp,
        "severity": severity,
        "source": rng.choice(SOURCES),
        "message": rng.choice(LOG_MESSAGES[severity]),
        "ip_address": _random_ip(rng) if rng.random() < 0.7 else None,
        "user_agent": rng.choice(USER_AGENTS) if rng.random() < 0.5 else None,
        "created_at": timestamp,
    }


def generate_log_entries(count: int = 50, *, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Return `count` fabricated log entries from the last three days, newest first."""
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    entries = [
        _fabricate_log_entry(rng, entry_id=i + 1, timestamp=_random_past(rng, now, LOG_HOURS_BACK))
        for i in range(count)
    ]
    entries.sort(key=lambda e: e["timestamp"], reverse=True)
    return entries


def generate_network_activities(count: int = 100, *, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Return `count` fabricated map points from the last two days, newest first.

    Each point sits near a hotspot city; country and city always agree with
    the hotspot the coordinates were jittered from.
    """
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    activities: List[Dict[str, Any]] = []

    for i in range(count):
        activity_type = rng.choice(ACTIVITY_TYPES)
        severity = rng.choice(SEVERITIES)
        country, city, base_lat, base_lng = rng.choice(HOTSPOTS)
        latitude = _clamp(base_lat + (rng.random() - 0.5) * 2 * LAT_JITTER, -90.0, 90.0)
        longitude = _clamp(base_lng + (rng.random() - 0.5) * 2 * LNG_JITTER, -180.0, 180.0)
        title = rng.choice(ACTIVITY_TITLES[activity_type])
        timestamp = _random_past(rng, now, ACTIVITY_HOURS_BACK)

        activities.append(
            {
                "id": i + 1,
                "latitude": latitude,
                "longitude": longitude,
                "activity_type": activity_type,
                "title": title,
                "description": f"{title} from {city}, {country}. {rng.choice(DESCRIPTION_SUFFIXES)}",
                "ip_address": _random_ip(rng),
                "port": rng.randint(1, 65535) if rng.random() < 0.7 else None,
                "country": country,
                "city": city,
                "severity": severity,
                "timestamp": timestamp,
                "metadata": {
                    "bytes_transferred": rng.randint(1024, 1048576),
                    "connection_duration": rng.randint(1, 3600),
                    "protocol": rng.choice(PROTOCOLS),
                    "risk_score": round(rng.uniform(0, 100), 2),
                    "blocked": rng.random() < 0.3,
                },
                "created_at": timestamp,
            }
        )

    activities.sort(key=lambda a: a["timestamp"], reverse=True)
    return activities


def random_log_entry(*, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """One fabricated entry stamped now; the id is the millisecond clock."""
    rng = rng or random.Random()
    return _fabricate_log_entry(
        rng,
        entry_id=int(time.time() * 1000),
        timestamp=datetime.now(timezone.utc),
    )
