"""Unit tests for RemoteStoreClient.

All networking goes through httpx.MockTransport.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from studyplan_cli.models.config_models import RemoteConfig
from studyplan_cli.models.exceptions import RemoteStoreError
from studyplan_cli.services.api.client import RemoteStoreClient, eq

REMOTE_URL = "https://planner.example.test"


def _client(handler, retry: int = 0, token: str | None = "session-token", url: str = REMOTE_URL):
    config = RemoteConfig(url=url, api_key="anon-key", retry=retry)
    return RemoteStoreClient(config, token, transport=httpx.MockTransport(handler))


def test_eq():
    assert eq("abc") == "eq.abc"
    assert eq(True) == "eq.true"
    assert eq(3) == "eq.3"


@pytest.mark.asyncio
async def test_select_builds_postgrest_query():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[{"id": "t1"}])

    client = _client(handler)
    rows = await client.select("tasks", filters={"user_id": "u1"}, columns="id", limit=1)
    await client.close()

    request = seen[0]
    assert rows == [{"id": "t1"}]
    assert request.url.path == "/rest/v1/tasks"
    assert request.url.params["select"] == "id"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["limit"] == "1"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer session-token"


@pytest.mark.asyncio
async def test_api_key_is_bearer_without_session():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    client = _client(handler, token=None)
    await client.select("tasks")
    await client.close()

    assert seen[0].headers["Authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_upsert_request_shape():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json=[{"id": "c1"}])

    client = _client(handler)
    await client.upsert("classes", [{"id": "c1"}])
    await client.close()

    request = seen[0]
    assert request.method == "POST"
    assert request.url.params["on_conflict"] == "id"
    assert "merge-duplicates" in request.headers["Prefer"]


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(401, json={"message": "JWT expired"})

    client = _client(handler, retry=3)
    with pytest.raises(RemoteStoreError) as exc_info:
        await client.select("tasks")
    await client.close()

    assert exc_info.value.status_code == 401
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_server_error_is_retried_with_backoff():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=[{"id": "t1"}])

    client = _client(handler, retry=2)
    with patch("studyplan_cli.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
        rows = await client.select("tasks")
    await client.close()

    assert rows == [{"id": "t1"}]
    assert len(calls) == 3
    assert [c.args[0] for c in sleep.await_args_list] == [1, 2]


@pytest.mark.asyncio
async def test_transport_error_exhausts_retries():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, retry=1)
    with patch("studyplan_cli.services.api.client.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(RemoteStoreError, match="after 2 attempt"):
            await client.select("tasks")
    await client.close()


@pytest.mark.asyncio
async def test_unconfigured_url():
    client = _client(lambda request: httpx.Response(200, json=[]), url="")
    with pytest.raises(RemoteStoreError, match="not configured"):
        await client.select("tasks")


@pytest.mark.asyncio
async def test_client_recreated_after_close():
    client = _client(lambda request: httpx.Response(200, json=[]))
    await client.select("tasks")
    await client.close()
    assert await client.select("tasks") == []
    await client.close()


@pytest.mark.asyncio
async def test_per_call_retry_overrides_config():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    client = _client(handler, retry=3)
    with patch("studyplan_cli.services.api.client.asyncio.sleep", new=AsyncMock()) as sleep:
        with pytest.raises(RemoteStoreError, match="after 1 attempt"):
            await client.select("tasks", retry=0)
        with pytest.raises(RemoteStoreError, match="after 1 attempt"):
            await client.upsert("tasks", [{"id": "t1"}], retry=0)
    await client.close()

    assert [c.method for c in calls] == ["GET", "POST"]
    sleep.assert_not_awaited()
