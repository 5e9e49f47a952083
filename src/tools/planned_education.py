"""MCP tools for adult education (Komvux, SFI, Yrkeshögskola) and its support data."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP

from clients.planned_education_client import PlannedEducationClient
from core.errors import ValidationError
from core.inputs import normalize_date, normalize_event_id

_EVENT_FIELDS = {
    "id": "educationEventId",
    "title": "titleSv",
    "provider": "providerName",
    "municipality": "municipality",
    "county": "county",
    "town": "town",
    "typeOfSchool": "typeOfSchool",
    "distance": "distance",
    "paceOfStudy": "paceOfStudy",
    "semesterStart": "semesterStartFrom",
    "credits": "credits",
}


def listed_events(body: Dict[str, Any]) -> List[Dict[str, Any]]:
    embedded = body.get("_embedded") or {}
    events = embedded.get("listedAdultEducationEvents") or []
    return [e for e in events if isinstance(e, dict)]


def summarize_event(event: Dict[str, Any], fields: Optional[List[str]] = None) -> Dict[str, Any]:
    names = fields or list(_EVENT_FIELDS)
    return {name: event.get(_EVENT_FIELDS[name]) for name in names}


def _total(body: Dict[str, Any], events: List[Dict[str, Any]]) -> int:
    return (body.get("page") or {}).get("totalElements") or len(events)


def register(mcp: FastMCP, *, planned_education_client: PlannedEducationClient) -> None:
    client = planned_education_client

    @mcp.tool(name="search_adult_education")
    async def search_adult_education(
        searchTerm: Optional[str] = None,
        town: Optional[str] = None,
        county: Optional[str] = None,
        municipality: Optional[str] = None,
        typeOfSchool: Optional[str] = None,
        distance: Optional[Literal["true", "false"]] = None,
        paceOfStudy: Optional[str] = None,
        semesterStartFrom: Optional[str] = None,
        page: int = 0,
        size: int = 20,
    ) -> Dict[str, Any]:
        """Search adult education events (Komvux, SFI, Yrkeshögskola).

        Params:
          - searchTerm: free-text search.
          - town / county / municipality: location filters.
          - typeOfSchool: e.g. "yh", "sfi", "komvuxgycourses".
          - distance: "true" for distance studies, "false" for campus.
          - paceOfStudy: e.g. "100", "50" or a range like "50-100".
          - semesterStartFrom: earliest start date (YYYY-MM-DD).
          - page: zero-based page number. size: results per page (max 100).
        """
        body = await client.search_adult_education({
            "searchTerm": searchTerm,
            "town": town,
            "county": county,
            "municipality": municipality,
            "typeOfSchool": typeOfSchool,
            "distance": distance,
            "paceOfStudy": paceOfStudy,
            "semesterStartFrom": normalize_date(semesterStartFrom),
            "page": page,
            "size": size,
        })
        events = listed_events(body)
        page_info = body.get("page") or {}
        return {
            "totalResults": _total(body, events),
            "currentPage": page_info.get("number") or 0,
            "totalPages": page_info.get("totalPages") or 1,
            "showing": len(events),
            "educationEvents": [summarize_event(e) for e in events],
        }

    @mcp.tool(name="get_adult_education_details")
    async def get_adult_education_details(id: str) -> Dict[str, Any]:
        """Get full details of one adult education event by its id."""
        return await client.get_adult_education_details(normalize_event_id(id))

    @mcp.tool(name="filter_adult_education_by_distance")
    async def filter_adult_education_by_distance(
        distance: bool,
        searchTerm: Optional[str] = None,
        page: int = 0,
        size: int = 20,
    ) -> Dict[str, Any]:
        """List only distance (distance=True) or only campus (distance=False) adult education."""
        body = await client.search_adult_education({
            "distance": "true" if distance else "false",
            "searchTerm": searchTerm,
            "page": page,
            "size": size,
        })
        events = listed_events(body)
        return {
            "filter": "Distance education only" if distance else "Campus education only",
            "totalResults": _total(body, events),
            "showing": len(events),
            "educationEvents": [
                summarize_event(e, ["id", "title", "provider", "distance", "municipality"]) for e in events
            ],
        }

    @mcp.tool(name="filter_adult_education_by_pace")
    async def filter_adult_education_by_pace(
        paceOfStudy: str,
        searchTerm: Optional[str] = None,
        page: int = 0,
        size: int = 20,
    ) -> Dict[str, Any]:
        """List adult education with a given study pace ("100" full time, "50" half time)."""
        if not paceOfStudy or not paceOfStudy.strip():
            raise ValidationError("Missing paceOfStudy")
        pace = paceOfStudy.strip()
        body = await client.search_adult_education({
            "paceOfStudy": pace,
            "searchTerm": searchTerm,
            "page": page,
            "size": size,
        })
        events = listed_events(body)
        return {
            "paceFilter": pace,
            "totalResults": _total(body, events),
            "showing": len(events),
            "educationEvents": [
                summarize_event(e, ["id", "title", "provider", "paceOfStudy", "municipality"]) for e in events
            ],
        }

    @mcp.tool(name="get_education_areas")
    async def get_education_areas() -> Dict[str, Any]:
        """List the education areas used to classify adult education."""
        return await client.get_education_areas()

    @mcp.tool(name="get_directions")
    async def get_directions() -> Dict[str, Any]:
        """List the study directions (inriktningar) used by adult education."""
        return await client.get_directions()
