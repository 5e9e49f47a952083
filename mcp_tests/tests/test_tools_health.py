import httpx
import pytest

import tools.health as health_mod
from clients.school_units_client import SchoolUnitsClient
from core.backoff import RetryPolicy
from core.cache import ResponseCache
from core.errors import AuthenticationError, ExternalServiceError, TransientError
from tools import health as health_tool


class FakeClient:
    def __init__(self, base_url, exc=None):
        self.base_url = base_url
        self._exc = exc
        self.calls = []

    async def _answer(self, use_cache, value):
        self.calls.append(use_cache)
        if self._exc:
            raise self._exc
        return value

    async def get_api_info(self, *, use_cache=True):
        return await self._answer(use_cache, {})

    async def get_all_school_units(self, *, use_cache=True):
        return await self._answer(use_cache, [])

    async def get_education_areas(self, *, use_cache=True):
        return await self._answer(use_cache, {})


def register(dummy_mcp, *, syllabus=None, units=None, planned=None, cache=None):
    clients = {
        "syllabus_client": syllabus or FakeClient("https://syllabus"),
        "school_units_client": units or FakeClient("https://units"),
        "planned_education_client": planned or FakeClient("https://planned"),
    }
    health_tool.register(dummy_mcp, cache=cache, **clients)
    return clients


@pytest.mark.asyncio
async def test_all_healthy(dummy_mcp):
    clients = register(dummy_mcp, cache=ResponseCache())

    out = await dummy_mcp.tools["health_check"]()

    assert out["overall"] == "healthy"
    assert [s["service"] for s in out["services"]] == [
        "Configuration",
        "Syllabus API",
        "School Units API",
        "Planned Education API",
    ]
    assert out["services"][3]["url"] == "https://planned"
    assert out["cache"]["size"] == 0
    assert out["recommendations"] == []
    assert all(c.calls == [False] for c in clients.values())


@pytest.mark.asyncio
async def test_failures_are_reported_with_recommendations(dummy_mcp):
    register(
        dummy_mcp,
        syllabus=FakeClient("https://syllabus", exc=AuthenticationError("denied", status_code=401)),
        units=FakeClient("https://units", exc=TransientError("down", status_code=503)),
    )

    out = await dummy_mcp.tools["health_check"]()

    assert out["overall"] == "unhealthy"
    assert out["services"][1]["status"] == "unhealthy"
    assert out["services"][1]["error"] == "denied"
    assert out["services"][3]["status"] == "healthy"
    assert out["cache"] is None
    assert any("Authentication" in r for r in out["recommendations"])
    assert any("Temporary error" in r for r in out["recommendations"])
    assert any("Cache is disabled" in r for r in out["recommendations"])


@pytest.mark.asyncio
async def test_planned_education_failure_is_reported(dummy_mcp):
    register(
        dummy_mcp,
        planned=FakeClient("https://planned", exc=ExternalServiceError("NOT_FOUND")),
        cache=ResponseCache(),
    )

    out = await dummy_mcp.tools["health_check"]()

    assert out["overall"] == "unhealthy"
    assert out["services"][3]["service"] == "Planned Education API"
    assert out["services"][3]["error"] == "NOT_FOUND"
    assert out["recommendations"] == ["Cannot reach Planned Education API - check network and URL"]


@pytest.mark.asyncio
async def test_unexpected_exception_is_reported_not_raised(dummy_mcp):
    register(dummy_mcp, units=FakeClient("https://units", exc=AttributeError("'list' object has no attribute 'get'")))

    out = await dummy_mcp.tools["health_check"]()

    assert out["overall"] == "unhealthy"
    assert out["services"][2]["status"] == "unhealthy"
    assert out["services"][2]["error"].startswith("AttributeError")
    assert any("Unexpected error from School Units API" in r for r in out["recommendations"])


@pytest.mark.asyncio
async def test_malformed_school_units_payload_marks_service_unhealthy(dummy_mcp, monkeypatch):
    units = SchoolUnitsClient(
        base_url="https://api.example.test/skolenhetsregistret/v2",
        retry_policy=RetryPolicy(max_retries=0),
    )
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": [{"x": 1}]}))
    monkeypatch.setattr(
        units,
        "_create_client",
        lambda: httpx.AsyncClient(base_url=units._base_url, headers=units._headers, transport=transport),
    )
    register(dummy_mcp, units=units)

    out = await dummy_mcp.tools["health_check"]()

    assert out["overall"] == "unhealthy"
    assert out["services"][2]["service"] == "School Units API"
    assert out["services"][2]["error"] == "Unexpected School Units payload"


@pytest.mark.asyncio
async def test_slow_api_is_degraded():
    times = iter([0.0, 2.5])

    async def call():
        return None

    result, hint = await health_mod.probe(
        "Syllabus API", "https://syllabus", call, clock=lambda: next(times)
    )

    assert result.status == "degraded"
    assert result.latency_ms == 2500
    assert "slow" in hint


@pytest.mark.asyncio
async def test_skip_api_tests(dummy_mcp):
    clients = register(dummy_mcp, cache=ResponseCache())

    out = await dummy_mcp.tools["health_check"](include_api_tests=False)

    assert len(out["services"]) == 1
    assert all(c.calls == [] for c in clients.values())
