"""MCP tool that probes the upstream Skolverket APIs and reports server health."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from mcp.server.fastmcp import FastMCP

from clients.planned_education_client import PlannedEducationClient
from clients.school_units_client import SchoolUnitsClient
from clients.syllabus_client import SyllabusClient
from config import HTTP_TIMEOUT, MAX_RETRIES
from core.cache import ResponseCache
from core.errors import AuthenticationError, SkolverketError, TransientError
from core.models import ServiceHealth

logger = logging.getLogger(__name__)

SLOW_THRESHOLD_MS = 2000


async def probe(
    name: str,
    url: str,
    call: Callable[[], Awaitable[Any]],
    *,
    clock: Callable[[], float] = time.monotonic,
) -> Tuple[ServiceHealth, Optional[str]]:
    """Time one upstream call; return its health and an optional recommendation."""
    start = clock()
    try:
        await call()
    except AuthenticationError as e:
        return (
            ServiceHealth(service=name, status="unhealthy", error=str(e), url=url),
            "Authentication failed - check if an API key is required",
        )
    except TransientError as e:
        return (
            ServiceHealth(service=name, status="unhealthy", error=str(e), url=url),
            f"Temporary error - {name} may be experiencing issues",
        )
    except SkolverketError as e:
        return (
            ServiceHealth(service=name, status="unhealthy", error=str(e), url=url),
            f"Cannot reach {name} - check network and URL",
        )
    except Exception as e:
        # health_check reports every upstream failure instead of raising
        logger.exception("Health check of %s failed unexpectedly", name)
        return (
            ServiceHealth(service=name, status="unhealthy", error=f"{type(e).__name__}: {e}", url=url),
            f"Unexpected error from {name} - check the server logs",
        )

    latency_ms = int((clock() - start) * 1000)
    if latency_ms < SLOW_THRESHOLD_MS:
        return ServiceHealth(service=name, status="healthy", latency_ms=latency_ms, url=url), None
    return (
        ServiceHealth(service=name, status="degraded", latency_ms=latency_ms, url=url),
        f"{name} response time is slow (>{SLOW_THRESHOLD_MS // 1000}s)",
    )


def overall_status(results: List[ServiceHealth]) -> str:
    states = {r.status for r in results}
    if "unhealthy" in states:
        return "unhealthy"
    if "degraded" in states:
        return "degraded"
    return "healthy"


def register(
    mcp: FastMCP,
    *,
    syllabus_client: SyllabusClient,
    school_units_client: SchoolUnitsClient,
    planned_education_client: PlannedEducationClient,
    cache: Optional[ResponseCache] = None,
) -> None:
    @mcp.tool(name="health_check")
    async def health_check(include_api_tests: bool = True) -> Dict[str, Any]:
        """Check server configuration and, optionally, live API reachability.

        Params:
          - include_api_tests: call each upstream API once, uncached (default: True).

        Returns:
          overall status, timestamp, config summary, per-service results,
          cache statistics and recommendations.
        """
        results: List[ServiceHealth] = [ServiceHealth(service="Configuration", status="healthy")]
        recommendations: List[str] = []

        if cache is None:
            recommendations.append("Cache is disabled - enabling it will improve performance")

        if include_api_tests:
            checks = [
                ("Syllabus API", syllabus_client.base_url,
                 lambda: syllabus_client.get_api_info(use_cache=False)),
                ("School Units API", school_units_client.base_url,
                 lambda: school_units_client.get_all_school_units(use_cache=False)),
                ("Planned Education API", planned_education_client.base_url,
                 lambda: planned_education_client.get_education_areas(use_cache=False)),
            ]
            for name, url, call in checks:
                result, hint = await probe(name, url, call)
                results.append(result)
                if hint:
                    recommendations.append(hint)

        return {
            "overall": overall_status(results),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "config": {
                "cacheEnabled": cache is not None,
                "maxRetries": MAX_RETRIES,
                "timeoutSeconds": HTTP_TIMEOUT,
            },
            "services": [asdict(r) for r in results],
            "cache": cache.stats().as_dict() if cache is not None else None,
            "recommendations": recommendations,
        }
