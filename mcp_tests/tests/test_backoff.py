import httpx
import pytest

import core.backoff as backoff_mod
from core.backoff import RetryPolicy, parse_retry_after


def _resp(status: int, headers: dict[str, str] | None = None):
    req = httpx.Request("GET", "https://example.test/x")
    return httpx.Response(status, headers=headers or {}, request=req)


@pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
def test_should_retry_throttling_and_server_errors(status):
    assert RetryPolicy().should_retry(_resp(status)) is True


@pytest.mark.parametrize("status", [200, 400, 401, 403, 404, 501])
def test_should_not_retry_other_statuses(status):
    assert RetryPolicy().should_retry(_resp(status)) is False


def test_delay_is_exponential_and_bounded():
    p = RetryPolicy(base_delay_seconds=1.0, max_sleep_seconds=5.0)

    assert [p.delay_for(i) for i in range(4)] == [1.0, 2.0, 4.0, 5.0]


def test_delay_honors_retry_after_on_429():
    p = RetryPolicy(base_delay_seconds=1.0, max_sleep_seconds=60.0)

    assert p.delay_for(0, _resp(429, {"Retry-After": "10"})) == 10.0


def test_delay_retry_after_is_bounded():
    p = RetryPolicy(max_sleep_seconds=5.0)

    assert p.delay_for(0, _resp(429, {"Retry-After": "10"})) == 5.0


def test_delay_falls_back_without_retry_after():
    p = RetryPolicy(base_delay_seconds=0.5)

    assert p.delay_for(1, _resp(429)) == 1.0
    assert p.delay_for(1, _resp(503, {"Retry-After": "30"})) == 1.0


@pytest.mark.parametrize("value,expected", [("10", 10), (" 3 ", 3), ("soon", None), ("", None)])
def test_parse_retry_after(value, expected):
    assert parse_retry_after({"Retry-After": value}) == expected


def test_max_attempts():
    assert RetryPolicy(max_retries=3).max_attempts == 4
    assert RetryPolicy(max_retries=-1).max_attempts == 1


@pytest.mark.asyncio
async def test_wait_sleeps_for_computed_delay(monkeypatch):
    calls = []

    async def fake_sleep(seconds: float):
        calls.append(seconds)

    monkeypatch.setattr(backoff_mod.asyncio, "sleep", fake_sleep)

    p = RetryPolicy(base_delay_seconds=2.0)
    await p.wait(1)
    await p.wait(0, _resp(429, {"Retry-After": "7"}))

    assert calls == [4.0, 7.0]
