"""MCP tools to inspect and manage the response cache."""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.cache import ResponseCache
from core.errors import ValidationError


def register(mcp: FastMCP, *, cache: ResponseCache) -> None:
    @mcp.tool(name="get_cache_stats")
    async def get_cache_stats() -> Dict[str, Any]:
        """Return cache size, hit/miss/eviction counters and hit/utilization rates (percent)."""
        return cache.stats().as_dict()

    @mcp.tool(name="clear_cache")
    async def clear_cache() -> Dict[str, Any]:
        """Drop every cached API response and reset hit/miss counters."""
        removed = len(cache)
        cache.clear()
        return {"entriesRemoved": removed}

    @mcp.tool(name="prune_cache")
    async def prune_cache() -> Dict[str, Any]:
        """Remove expired cache entries now instead of waiting for the background pass."""
        return {"entriesRemoved": cache.prune()}

    @mcp.tool(name="invalidate_cache")
    async def invalidate_cache(pattern: str) -> Dict[str, Any]:
        """Remove cached responses whose request key contains `pattern`.

        Keys have the form "<base_url><path>:<json params>", so a pattern
        like "/v1/subjects" drops every cached subject lookup.
        """
        if not pattern or not pattern.strip():
            raise ValidationError("Missing pattern")
        return {"entriesRemoved": cache.invalidate_pattern(pattern.strip())}
