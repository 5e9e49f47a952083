"""Client for the Skolverket Syllabus API (läroplan, ämnen, kurser, program)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from clients.base_client import BaseApiClient
from core.errors import ValidationError
from core.models import SYLLABUS_KINDS


class SyllabusClient(BaseApiClient):
    """Async client for the Syllabus API.

    Entity endpoints (subject, course, program, curriculum) share one URL
    shape, so they go through `search`, `get_entity` and `get_versions`
    keyed by kind. Value-store lookups change rarely and are cached with
    the cache's default TTL.
    """

    async def search(self, kind: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.get_cached(f"/v1/{_collection(kind)}", params)

    async def get_entity(self, kind: str, code: str, version: Optional[int] = None) -> Dict[str, Any]:
        path = f"/v1/{_collection(kind)}/{code}"
        if version:
            path = f"{path}/versions/{version}"
        return await self.get_cached(path)

    async def get_versions(self, kind: str, code: str) -> Dict[str, Any]:
        return await self.get_cached(f"/v1/{_collection(kind)}/{code}/versions")

    # --- Value store ---

    async def get_school_types(self) -> List[Dict[str, Any]]:
        data = await self.get_cached("/v1/valuestore/schooltypes")
        return data.get("schoolTypes") or []

    async def get_expired_school_types(self) -> List[Dict[str, Any]]:
        data = await self.get_cached("/v1/valuestore/schooltypes/expired")
        return data.get("schoolTypes") or []

    async def get_types_of_syllabus(self) -> List[Dict[str, Any]]:
        data = await self.get_cached("/v1/valuestore/typeofsyllabus")
        return data.get("typesOfSyllabus") or []

    async def get_subject_and_course_codes(self) -> List[Dict[str, Any]]:
        data = await self.get_cached("/v1/valuestore/subjectandcoursecodes")
        return data.get("codes") or []

    async def get_study_path_codes(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self.get_cached("/v1/valuestore/studypathcodes", params)
        return data.get("studyPaths") or []

    async def get_api_info(self, *, use_cache: bool = True) -> Dict[str, Any]:
        if use_cache:
            return await self.get_cached("/v1/api-info")
        return await self.get("/v1/api-info")


def _collection(kind: str) -> str:
    try:
        return SYLLABUS_KINDS[kind]
    except KeyError:
        raise ValidationError(f"Unknown syllabus kind: {kind}") from None
