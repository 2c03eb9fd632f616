"""Async client for the alumni tracker REST API."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

import httpx

from liberation.models import AlumniRecord

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Raised when the tracker API returns an error."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(TrackerError):
    """Raised when we hit a rate limit (429)."""

    def __init__(self, message: str, retry_after: float = 0):
        self.retry_after = retry_after
        super().__init__(message, status_code=429)


class TrackerClient:
    """Async wrapper for the tracker's alumni endpoints.

    Usage::

        async with TrackerClient("https://tracker.example.org/api", api_key="...") as api:
            records = await api.list_alumni(limit=50)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._allowed_host = httpx.URL(base_url).host
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> TrackerClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # ── Request helpers ─────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Make an authenticated API request and return the parsed body."""
        def _json_or_empty(resp: httpx.Response) -> Any:
            if not resp.content:
                return {}
            try:
                return resp.json()
            except ValueError:
                return {}

        # Credentials only ever go to the configured host
        url = self._client.build_request(method, path).url
        if url.host != self._allowed_host:
            raise TrackerError(f"Refusing to send credentials to {url.host}")

        resp = await self._client.request(method, path, **kwargs)
        body = _json_or_empty(resp)
        error_body = body if isinstance(body, dict) else {}

        if resp.status_code == 429:
            retry = error_body.get("retryAfter", resp.headers.get("Retry-After", 0))
            try:
                retry_after = float(retry)
            except (TypeError, ValueError):
                retry_after = 0.0
            raise RateLimitError(
                f"Rate limited: {error_body.get('message', 'too many requests')}",
                retry_after=retry_after,
            )

        if resp.status_code >= 400:
            raise TrackerError(
                error_body.get("message", f"HTTP {resp.status_code}"),
                status_code=resp.status_code,
            )

        return body

    async def _get(self, path: str, **params: Any) -> Any:
        params = {k: v for k, v in params.items() if v is not None}
        return await self._request("GET", path, params=params)

    async def _patch(self, path: str, json_body: dict[str, Any]) -> Any:
        # None is meaningful here (clears a field), so it is sent as-is
        return await self._request("PATCH", path, json=json_body)

    # ── Alumni ──────────────────────────────────────────────────

    async def list_alumni(self, page: int = 1, limit: int = 100) -> tuple[list[AlumniRecord], int]:
        """One page of alumni and the total count across all pages."""
        data = await self._get("/alumni/paginated", page=page, limit=limit)
        if isinstance(data, list):
            items, total = data, len(data)
        else:
            items = data.get("alumni", [])
            total = int(data.get("totalCount", len(items)))
        return [AlumniRecord.from_api(a) for a in items if isinstance(a, dict)], total

    async def iter_alumni(self, page_size: int = 100) -> AsyncIterator[AlumniRecord]:
        """Every alumni record, page by page."""
        page = 1
        seen = 0
        while True:
            records, total = await self.list_alumni(page=page, limit=page_size)
            for record in records:
                yield record
            seen += len(records)
            if not records or seen >= total:
                break
            page += 1
        logger.debug("Fetched %d alumni records over %d pages", seen, page)

    async def get_alumni(self, alumni_id: int) -> AlumniRecord:
        data = await self._get(f"/alumni/{alumni_id}")
        return AlumniRecord.from_api(data)

    async def update_alumni(self, alumni_id: int, patch: dict[str, Any]) -> AlumniRecord:
        data = await self._patch(f"/alumni/{alumni_id}", patch)
        logger.info("Updated alumni %s: %s", alumni_id, ", ".join(sorted(patch)))
        return AlumniRecord.from_api(data)
