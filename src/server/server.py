"""Server bootstrap for the Skolverket MCP service.

Creates the FastMCP instance, builds the shared response cache and API
clients once, injects them into the tools, ties the cache's background
pruning to the server lifespan and starts the MCP server (stdio transport).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP

from clients.planned_education_client import PlannedEducationClient
from clients.school_units_client import SchoolUnitsClient
from clients.syllabus_client import SyllabusClient
from config import (
    API_KEY,
    AUTH_HEADER,
    CACHE_MAX_ENTRIES,
    CACHE_PRUNE_INTERVAL_MS,
    CACHE_TTL_MS,
    ENABLE_CACHE,
    HTTP_TIMEOUT,
    HTTP_VERIFY,
    LOG_LEVEL,
    MAX_CONCURRENT,
    MAX_RETRIES,
    PLANNED_EDUCATION_API_URL,
    RETRY_DELAY,
    SCHOOL_UNITS_API_URL,
    SERVER_NAME,
    SYLLABUS_API_URL,
)
from core.backoff import RetryPolicy
from core.cache import ResponseCache
from core.log import setup_logging

from tools.cache_admin import register as register_cache_admin
from tools.health import register as register_health
from tools.planned_education import register as register_planned_education
from tools.school_units import register as register_school_units
from tools.syllabus import register as register_syllabus
from tools.valuestore import register as register_valuestore


def build_cache() -> Optional[ResponseCache]:
    """Build the shared response cache, or return None when caching is disabled."""
    if not ENABLE_CACHE:
        return None
    return ResponseCache(max_entries=CACHE_MAX_ENTRIES, default_ttl_ms=CACHE_TTL_MS)


cache = build_cache()


@asynccontextmanager
async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
    # Auto-prune lives exactly as long as the server does
    if cache is not None:
        cache.start_auto_prune(CACHE_PRUNE_INTERVAL_MS)
    try:
        yield
    finally:
        if cache is not None:
            cache.stop_auto_prune()


mcp = FastMCP(SERVER_NAME, lifespan=lifespan)


def register_all(app: FastMCP, cache: Optional[ResponseCache]) -> None:
    """Build one client per API, sharing `cache`, and register every tool on `app`."""
    client_kwargs = dict(
        timeout=HTTP_TIMEOUT,
        verify=HTTP_VERIFY,
        api_key=API_KEY,
        auth_header=AUTH_HEADER,
        max_concurrent=MAX_CONCURRENT,
        retry_policy=RetryPolicy(max_retries=MAX_RETRIES, base_delay_seconds=RETRY_DELAY),
        cache=cache,
    )
    syllabus_client = SyllabusClient(base_url=SYLLABUS_API_URL, **client_kwargs)
    school_units_client = SchoolUnitsClient(base_url=SCHOOL_UNITS_API_URL, **client_kwargs)
    planned_education_client = PlannedEducationClient(base_url=PLANNED_EDUCATION_API_URL, **client_kwargs)

    register_syllabus(app, syllabus_client=syllabus_client)
    register_valuestore(app, syllabus_client=syllabus_client)
    register_school_units(app, school_units_client=school_units_client)
    register_planned_education(app, planned_education_client=planned_education_client)
    register_health(
        app,
        syllabus_client=syllabus_client,
        school_units_client=school_units_client,
        planned_education_client=planned_education_client,
        cache=cache,
    )
    if cache is not None:
        register_cache_admin(app, cache=cache)


register_all(mcp, cache)


def main() -> None:
    setup_logging(LOG_LEVEL)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
