"""Retry decisions and bounded sleeps for Skolverket API calls.

- Retry on 429 and 500-504 responses, and on transport errors.
- Honor a numeric Retry-After header on 429.
- Otherwise back off exponentially from a base delay.
- Every sleep is bounded so a single call cannot block for long.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

import httpx

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class RetryPolicy:
    def __init__(
        self,
        *,
        max_retries: int = 3,
        base_delay_seconds: float = 1.0,
        max_sleep_seconds: float = 60.0,
    ) -> None:
        self._max_retries = max(0, int(max_retries))
        self._base_delay = max(0.0, float(base_delay_seconds))
        self._max_sleep = max(0.0, float(max_sleep_seconds))

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    def should_retry(self, response: httpx.Response) -> bool:
        return response.status_code in RETRYABLE_STATUS

    def delay_for(self, attempt: int, response: Optional[httpx.Response] = None) -> float:
        # attempt is zero-based: the first retry waits base_delay
        if response is not None and response.status_code == 429:
            retry_after = parse_retry_after(response.headers)
            if retry_after is not None:
                return min(float(retry_after), self._max_sleep)
        return min(self._base_delay * (2 ** attempt), self._max_sleep)

    async def wait(self, attempt: int, response: Optional[httpx.Response] = None) -> None:
        await asyncio.sleep(self.delay_for(attempt, response))


def parse_retry_after(headers: Mapping[str, str]) -> Optional[int]:
    value = (headers.get("Retry-After") or "").strip()
    if not value.isdigit():
        return None
    return int(value)
