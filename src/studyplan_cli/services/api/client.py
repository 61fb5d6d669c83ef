"""HTTP client for the remote planner store.

The remote store exposes a PostgREST-compatible REST surface (the one Supabase
serves under ``/rest/v1``): tables are addressed by name, rows are filtered with
``column=eq.value`` query parameters and upserts are plain POSTs with a
merge-duplicates preference.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from studyplan_cli.models.config_models import RemoteConfig
from studyplan_cli.models.exceptions import RemoteStoreError
from studyplan_cli.utils.logger import get_logger

logger = get_logger("api")

REST_PREFIX = "/rest/v1"


def eq(value: Any) -> str:
    """Build a PostgREST equality filter value."""
    if isinstance(value, bool):
        value = str(value).lower()
    return f"eq.{value}"


class RemoteStoreClient:
    """Async HTTP client for the remote store tables."""

    def __init__(
        self,
        config: RemoteConfig,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Remote store configuration (URL, API key, timeout, retries)
            access_token: Session token of the signed-in user. The API key is
                used as bearer token when no session token is available.
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.base_url = config.url.rstrip("/")
        self.timeout = config.timeout
        self.access_token = access_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.api_key:
            headers["apikey"] = self.config.api_key
        bearer = self.access_token or self.config.api_key
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        self._client.headers.update(self._get_headers())
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        retry: int | None = None,
    ) -> httpx.Response:
        """Make a request against ``table``.

        Server errors and transport failures are retried with exponential
        backoff, ``retry`` times (the configured count when None); client
        errors (4xx) are not.

        Raises:
            RemoteStoreError: When the request ultimately fails
        """
        if not self.base_url:
            raise RemoteStoreError("Remote store URL is not configured")

        client = await self._get_client()
        url = f"{REST_PREFIX}/{table}"
        if retry is None:
            retry = self.config.retry

        last_exception: Exception | None = None
        for attempt in range(retry + 1):
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json,
                    headers=headers,
                )
                response.raise_for_status()
                return response
            except httpx.HTTPStatusError as e:
                if 400 <= e.response.status_code < 500:
                    raise RemoteStoreError(
                        f"{method} {table} failed: {e.response.status_code} {e.response.text}",
                        status_code=e.response.status_code,
                    ) from e
                last_exception = e
            except httpx.RequestError as e:
                last_exception = e

            logger.warning(
                "%s %s attempt %d failed: %s", method, table, attempt + 1, last_exception
            )
            if attempt < retry:
                await asyncio.sleep(2**attempt)

        status = None
        if isinstance(last_exception, httpx.HTTPStatusError):
            status = last_exception.response.status_code
        raise RemoteStoreError(
            f"{method} {table} failed after {retry + 1} attempt(s): {last_exception}",
            status_code=status,
        ) from last_exception

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        limit: int | None = None,
        retry: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select rows matching all equality ``filters``."""
        params: dict[str, Any] = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = eq(value)
        if limit is not None:
            params["limit"] = limit
        response = await self.request("GET", table, params=params, retry=retry)
        return response.json() or []

    async def upsert(
        self,
        table: str,
        rows: list[dict[str, Any]],
        on_conflict: str = "id",
        retry: int | None = None,
    ) -> list[dict[str, Any]]:
        """Insert ``rows``, updating existing rows with the same primary key."""
        response = await self.request(
            "POST",
            table,
            params={"on_conflict": on_conflict},
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
            retry=retry,
        )
        return response.json() or []

    async def update(
        self, table: str, values: dict[str, Any], *, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Update the rows matching ``filters`` and return them."""
        response = await self.request(
            "PATCH",
            table,
            params={column: eq(value) for column, value in filters.items()},
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return response.json() or []

    async def delete(
        self, table: str, *, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Delete the rows matching ``filters`` and return them."""
        response = await self.request(
            "DELETE",
            table,
            params={column: eq(value) for column, value in filters.items()},
            headers={"Prefer": "return=representation"},
        )
        return response.json() or []
