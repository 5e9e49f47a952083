"""Client for the Skolverket Planned Educations API (v4, adult education).

Every response is wrapped as `{"status", "message", "body"}`. The
envelope is checked inside the fetch, so a non-OK answer raises and is
never cached.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from clients.base_client import BaseApiClient
from core.errors import ExternalServiceError
from core.inputs import normalize_page, normalize_page_size


class PlannedEducationClient(BaseApiClient):
    ACCEPT = "application/vnd.skolverket.plannededucations.api.v4.hal+json"

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("accept", self.ACCEPT)
        super().__init__(**kwargs)

    async def search_adult_education(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        query = dict(params or {})
        query["page"] = normalize_page(query.get("page"))
        query["size"] = normalize_page_size(query.get("size"))
        return await self.get_cached("/adult-education-events", query, parse=unwrap_envelope)

    async def get_adult_education_details(self, event_id: str) -> Dict[str, Any]:
        return await self.get_cached(f"/adult-education-events/{event_id}", parse=unwrap_envelope)

    async def get_education_areas(self, *, use_cache: bool = True) -> Dict[str, Any]:
        if use_cache:
            return await self.get_cached("/support-data/areas", parse=unwrap_envelope)
        return await self.get("/support-data/areas", parse=unwrap_envelope)

    async def get_directions(self) -> Dict[str, Any]:
        return await self.get_cached("/support-data/directions", parse=unwrap_envelope)


def unwrap_envelope(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ExternalServiceError("Unexpected Planned Education payload")
    if payload.get("status") != "OK":
        raise ExternalServiceError(payload.get("message") or "Unknown error from Planned Education API")
    body = payload.get("body")
    if not isinstance(body, dict):
        raise ExternalServiceError("Unexpected Planned Education payload")
    return body
