"""MCP tools for the Syllabus API entity endpoints.

Registers search / details / versions tools for subjects, courses,
programs and curriculums. Search results are trimmed to a summary per
item so responses stay small enough for an LLM context.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from clients.syllabus_client import SyllabusClient
from core.inputs import normalize_code, normalize_date, normalize_limit, normalize_version
from core.models import SYLLABUS_KINDS, Timespan

DESCRIPTION_PREVIEW_CHARS = 150


def _preview(text: Optional[str]) -> Optional[str]:
    if not text:
        return text
    if len(text) <= DESCRIPTION_PREVIEW_CHARS:
        return text
    return text[:DESCRIPTION_PREVIEW_CHARS] + "..."


def summarize_search(result: Dict[str, Any], *, collection: str, limit: int) -> Dict[str, Any]:
    """Shape a raw search response into a bounded summary."""
    items = result.get(collection) or []
    total = int(result.get("totalElements") or len(items))
    shown = items[:limit]
    has_more = total > len(shown)

    out: Dict[str, Any] = {
        "totalElements": total,
        "returned": len(shown),
        "hasMore": has_more,
        collection: [
            {
                "code": item.get("code"),
                "name": item.get("name"),
                "schoolType": item.get("schoolType"),
                "typeOfSyllabus": item.get("typeOfSyllabus"),
                "version": item.get("version"),
                "description": _preview(item.get("description")),
            }
            for item in shown
        ],
    }
    if has_more:
        out["message"] = (
            f"Showing {len(shown)} of {total} {collection}. Use more specific filters to narrow the result."
        )
    return out


def _register_kind(mcp: FastMCP, client: SyllabusClient, kind: str) -> None:
    collection = SYLLABUS_KINDS[kind]

    @mcp.tool(
        name=f"search_{collection}",
        description=(
            f"Search Skolverket {collection}. Filters: schooltype (e.g. 'GR', 'GY'), "
            "timespan (LATEST, FUTURE, EXPIRED, MODIFIED), typeOfSyllabus, date (YYYY-MM-DD), "
            "limit (default 50, max 200)."
        ),
    )
    async def search(
        schooltype: Optional[str] = None,
        timespan: Timespan = "LATEST",
        type_of_syllabus: Optional[str] = None,
        date: Optional[str] = None,
        limit: int = 50,
    ) -> Dict[str, Any]:
        params = {
            "schooltype": (schooltype or "").strip() or None,
            "timespan": timespan,
            "typeOfSyllabus": (type_of_syllabus or "").strip() or None,
            "date": normalize_date(date),
        }
        result = await client.search(kind, params)
        return summarize_search(result, collection=collection, limit=normalize_limit(limit))

    @mcp.tool(
        name=f"get_{kind}_details",
        description=(
            f"Get full details for one {kind} by code. "
            "Optionally pin a version number; defaults to the latest version."
        ),
    )
    async def details(code: str, version: Optional[int] = None) -> Dict[str, Any]:
        return await client.get_entity(kind, normalize_code(code), normalize_version(version))

    @mcp.tool(
        name=f"get_{kind}_versions",
        description=f"List all published versions of a {kind}.",
    )
    async def versions(code: str) -> Dict[str, Any]:
        return await client.get_versions(kind, normalize_code(code))


def register(mcp: FastMCP, *, syllabus_client: SyllabusClient) -> None:
    for kind in SYLLABUS_KINDS:
        _register_kind(mcp, syllabus_client, kind)
