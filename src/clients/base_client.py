"""Shared async HTTP plumbing for the Skolverket API clients.

`BaseApiClient` opens a short-lived httpx client per call, limits
concurrency with a semaphore, retries throttled and transient failures
via `core.backoff.RetryPolicy`, and maps HTTP failures to the project's
error types. `get_cached` routes reads through a `ResponseCache`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Mapping, Optional

import httpx

from core.backoff import RetryPolicy, parse_retry_after
from core.cache import ResponseCache
from core.errors import (
    AuthenticationError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    TransientError,
)

logger = logging.getLogger(__name__)


class BaseApiClient:
    JSON_ACCEPT = "application/json"
    USER_AGENT = "skolverket-mcp/2.1.3"

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        verify: bool = True,
        api_key: Optional[str] = None,
        auth_header: str = "Authorization",
        accept: Optional[str] = None,
        max_concurrent: int = 5,
        retry_policy: Optional[RetryPolicy] = None,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)

        self._headers = {
            "Accept": accept or self.JSON_ACCEPT,
            "User-Agent": self.USER_AGENT,
        }
        if api_key:
            self._headers[auth_header or "Authorization"] = f"Bearer {api_key}"

        self._sem = asyncio.Semaphore(max(1, int(max_concurrent)))
        self._retry = retry_policy or RetryPolicy()
        self._cache = cache

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def cache(self) -> Optional[ResponseCache]:
        return self._cache

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """GET `path` and return the decoded JSON body, bypassing the cache.

        `parse` runs on the decoded body before it is returned (and, via
        `get_cached`, before it is cached); it raises on unexpected shapes.
        """
        query = _clean_params(params)
        async with self._create_client() as client:
            resp = await self._request(client, path, params=query)
            self._raise_for_status(resp, path=path)
            try:
                data = resp.json()
            except ValueError as e:
                raise ExternalServiceError(
                    f"Invalid JSON from Skolverket API ({path})", status_code=resp.status_code
                ) from e
        return parse(data) if parse is not None else data

    async def get_cached(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        ttl_ms: Optional[float] = None,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """GET through the response cache; falls back to `get` when caching is disabled."""
        if self._cache is None:
            return await self.get(path, params, parse=parse)

        key = self.cache_key(path, params)
        return await self._cache.get_or_fetch(key, lambda: self.get(path, params, parse=parse), ttl_ms)

    def cache_key(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        query = json.dumps(_clean_params(params), sort_keys=True, ensure_ascii=False)
        return f"{self._base_url}{path}:{query}"

    # --- HTTP helpers ---

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    async def _request(
        self,
        client: httpx.AsyncClient,
        path: str,
        *,
        params: Mapping[str, Any],
    ) -> httpx.Response:
        """GET with concurrency limit + bounded retries on throttling and transient failures."""
        attempts = self._retry.max_attempts

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                async with self._sem:
                    resp = await client.get(path, params=dict(params))
            except httpx.TransportError as e:
                if last_attempt:
                    raise TransientError(
                        f"Could not reach Skolverket API ({path}): {e}"
                    ) from e
                logger.warning("Retrying request path=%s attempt=%d error=%s", path, attempt + 1, e)
                await self._retry.wait(attempt)
                continue
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"Skolverket request failed ({path}): {e}") from e

            if not last_attempt and self._retry.should_retry(resp):
                logger.warning(
                    "Retrying request path=%s attempt=%d status=%d", path, attempt + 1, resp.status_code
                )
                await self._retry.wait(attempt, resp)
                continue

            return resp

        raise RuntimeError("Unreachable: _request did not return a response")

    def _raise_for_status(self, resp: httpx.Response, *, path: str) -> None:
        status = resp.status_code
        if status < 400:
            return

        if status == 404:
            raise NotFoundError(f"Not found: {path}")
        if status in (401, 403):
            raise AuthenticationError(
                "API authentication failed. Check if an API key is required and valid."
                if status == 401
                else "Access forbidden. Check API permissions.",
                status_code=status,
            )
        if status == 429:
            raise RateLimitError(
                "API rate limit reached. Retry later.",
                retry_after=parse_retry_after(resp.headers),
            )
        if 500 <= status <= 504:
            raise TransientError(
                f"Temporary Skolverket API error ({status}) for {path}", status_code=status
            )
        raise ExternalServiceError(_format_error(status, resp), status_code=status)


def _clean_params(params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v is not None}


def _format_error(status: int, resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        detail = data.get("detail") or data.get("message")
        if detail:
            return f"Skolverket API error ({status}): {detail}"
    return f"Skolverket API error ({status}): {resp.text[:200]}"
