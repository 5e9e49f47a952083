"""Shared literal types and small result models used by the MCP tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


Timespan = Literal["LATEST", "FUTURE", "EXPIRED", "MODIFIED"]
SchoolUnitStatus = Literal["AKTIV", "UPPHORT", "VILANDE"]
HealthState = Literal["healthy", "degraded", "unhealthy"]

# Syllabus entity kind -> collection path segment (also the key in search responses)
SYLLABUS_KINDS = {
    "subject": "subjects",
    "course": "courses",
    "program": "programs",
    "curriculum": "curriculums",
}


@dataclass(frozen=True)
class ServiceHealth:
    """Health probe result for one upstream API.

    Field groups:
    - Always: service, status
    - On success: latency_ms
    - On failure: error
    - Informational: url
    """

    service: str
    status: HealthState

    latency_ms: Optional[int] = None
    error: Optional[str] = None
    url: Optional[str] = None
