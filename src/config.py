"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used across the codebase (API base
URLs, HTTP timeouts and retries, cache sizing and logging level).
"""

from __future__ import annotations

import os
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


SERVER_NAME = "skolverket-mcp"
SERVER_VERSION = "2.1.3"

# Skolverket APIs
SYLLABUS_API_URL = _env_str("SKOLVERKET_SYLLABUS_API_URL", "https://api.skolverket.se/syllabus")
SCHOOL_UNITS_API_URL = _env_str(
    "SKOLVERKET_SCHOOL_UNITS_API_URL", "https://api.skolverket.se/skolenhetsregistret/v2"
)
PLANNED_EDUCATION_API_URL = _env_str(
    "SKOLVERKET_PLANNED_EDUCATION_API_URL", "https://api.skolverket.se/planned-educations"
)

# Authentication (the public APIs need none today)
API_KEY = _env_str("SKOLVERKET_API_KEY", None)
AUTH_HEADER = _env_str("SKOLVERKET_AUTH_HEADER", "Authorization")

# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)
HTTP_TIMEOUT = _env_float("SKOLVERKET_API_TIMEOUT", 30.0)
MAX_RETRIES = _env_int("SKOLVERKET_MAX_RETRIES", 3)
RETRY_DELAY = _env_float("SKOLVERKET_RETRY_DELAY", 1.0)
MAX_CONCURRENT = _env_int("SKOLVERKET_CONCURRENCY", 5)

# Response cache
ENABLE_CACHE = _env_bool("SKOLVERKET_ENABLE_CACHE", True)
CACHE_MAX_ENTRIES = _env_int("SKOLVERKET_CACHE_MAX_ENTRIES", 1000)
CACHE_TTL_MS = _env_int("SKOLVERKET_CACHE_TTL_MS", 3_600_000)
CACHE_PRUNE_INTERVAL_MS = _env_int("SKOLVERKET_CACHE_PRUNE_INTERVAL_MS", 300_000)

# Logging
LOG_LEVEL = (_env_str("LOG_LEVEL", "INFO") or "INFO").upper()
