"""MCP tools for Syllabus API reference data (the value store)."""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from clients.syllabus_client import SyllabusClient
from core.inputs import normalize_date


def register(mcp: FastMCP, *, syllabus_client: SyllabusClient) -> None:
    client = syllabus_client

    @mcp.tool(name="get_school_types")
    async def get_school_types(include_expired: bool = False) -> Dict[str, Any]:
        """List school types (e.g. GR, GY, VUX).

        Params:
          - include_expired: also return school types no longer in use.
        """
        active = await client.get_school_types()
        out: Dict[str, Any] = {"activeSchoolTypes": active}
        total = len(active)

        if include_expired:
            expired = await client.get_expired_school_types()
            out["expiredSchoolTypes"] = expired
            total += len(expired)

        out["total"] = total
        return out

    @mcp.tool(name="get_types_of_syllabus")
    async def get_types_of_syllabus() -> Dict[str, Any]:
        """List the kinds of syllabus documents (subject syllabus, course syllabus, ...)."""
        types = await client.get_types_of_syllabus()
        return {"typesOfSyllabus": types, "total": len(types)}

    @mcp.tool(name="get_subject_and_course_codes")
    async def get_subject_and_course_codes() -> Dict[str, Any]:
        """List every subject and course code with its type."""
        codes = await client.get_subject_and_course_codes()
        return {"codes": codes, "total": len(codes)}

    @mcp.tool(name="get_study_path_codes")
    async def get_study_path_codes(
        schooltype: str = "ALL",
        timespan: str = "ALL",
        date: Optional[str] = None,
        type_of_study_path: str = "ALL",
        type_of_program: str = "ALL",
    ) -> Dict[str, Any]:
        """List study path codes (programs and orientations), optionally filtered."""
        params = {
            "schooltype": schooltype,
            "timespan": timespan,
            "date": normalize_date(date),
            "typeOfStudyPath": type_of_study_path,
            "typeOfProgram": type_of_program,
        }
        paths = await client.get_study_path_codes(params)
        return {"studyPaths": paths, "total": len(paths)}

    @mcp.tool(name="get_api_info")
    async def get_api_info() -> Dict[str, Any]:
        """Return version and release information for the Syllabus API."""
        return await client.get_api_info()
