"""Client for the Skolverket School Units Registry (Skolenhetsregistret v2).

The registry has no server-side filtering, so the full unit list is
fetched once (and cached) and filtered locally.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from clients.base_client import BaseApiClient
from core.errors import ExternalServiceError
from core.models import SchoolUnitStatus


class SchoolUnitsClient(BaseApiClient):
    async def get_all_school_units(self, *, use_cache: bool = True) -> List[Dict[str, Any]]:
        if use_cache:
            return await self.get_cached("/school-units", parse=parse_school_units)
        return await self.get("/school-units", parse=parse_school_units)

    async def search_school_units(
        self,
        *,
        name: Optional[str] = None,
        status: Optional[SchoolUnitStatus] = None,
    ) -> List[Dict[str, Any]]:
        units = await self.get_all_school_units()

        if status:
            units = [u for u in units if u.get("status") == status]

        if name:
            term = name.strip().lower()
            units = [u for u in units if term in str(u.get("name") or "").lower()]

        return units

    async def get_school_unit(self, code: str) -> Optional[Dict[str, Any]]:
        for unit in await self.get_all_school_units():
            if unit.get("schoolUnitCode") == code:
                return unit
        return None


def parse_school_units(payload: Any) -> List[Dict[str, Any]]:
    """Extract `data.attributes` from a registry response.

    Raises ExternalServiceError when the envelope does not have the
    expected shape. Non-dict items inside the list are dropped.
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ExternalServiceError("Unexpected School Units payload")

    units = data.get("attributes")
    if units is None:
        return []
    if not isinstance(units, list):
        raise ExternalServiceError("Unexpected School Units payload")
    return [u for u in units if isinstance(u, dict)]
