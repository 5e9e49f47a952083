"""MCP tools for searching the School Units Registry."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from clients.school_units_client import SchoolUnitsClient
from core.errors import NotFoundError, ValidationError
from core.inputs import normalize_code, normalize_limit
from core.models import SchoolUnitStatus


def _page(units: List[Dict[str, Any]], limit: Optional[int]) -> Dict[str, Any]:
    shown = units[: normalize_limit(limit)]
    return {"totalFound": len(units), "showing": len(shown), "schoolUnits": shown}


def register(mcp: FastMCP, *, school_units_client: SchoolUnitsClient) -> None:
    client = school_units_client

    @mcp.tool(name="search_school_units")
    async def search_school_units(
        name: Optional[str] = None,
        status: Optional[SchoolUnitStatus] = None,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """Search school units by name (partial, case-insensitive) and/or status.

        Params:
          - name: part of the school unit name.
          - status: AKTIV, UPPHORT or VILANDE.
          - limit: maximum units to return (default 50, max 200).
        """
        units = await client.search_school_units(name=name, status=status)
        return _page(units, limit)

    @mcp.tool(name="get_school_unit_details")
    async def get_school_unit_details(code: str) -> Dict[str, Any]:
        """Get one school unit by its school unit code (e.g. "29824923").

        Raises:
          NotFoundError if no unit has that code.
        """
        code_clean = normalize_code(code)
        unit = await client.get_school_unit(code_clean)
        if unit is None:
            raise NotFoundError(f"No school unit found with code: {code_clean}")
        return unit

    @mcp.tool(name="get_school_units_by_status")
    async def get_school_units_by_status(status: SchoolUnitStatus, limit: int = 50) -> Dict[str, Any]:
        """List school units with a given status (AKTIV, UPPHORT, VILANDE)."""
        units = await client.search_school_units(status=status)
        return _page(units, limit)

    @mcp.tool(name="search_school_units_by_name")
    async def search_school_units_by_name(name: str, limit: int = 50) -> Dict[str, Any]:
        """Find school units whose name contains `name` (case-insensitive)."""
        if not name or not name.strip():
            raise ValidationError("Missing name")
        units = await client.search_school_units(name=name)
        return _page(units, limit)
