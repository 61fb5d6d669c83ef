"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state:
config and data directories live in ``tmp_path`` and the remote store is an
in-process fake served through ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from studyplan_cli.adapters.memory import MemoryEntityStore
from studyplan_cli.models.config_models import RemoteConfig
from studyplan_cli.services.api.client import RemoteStoreClient

REMOTE_URL = "https://planner.example.test"
CONTROL_PARAMS = {"select", "limit", "on_conflict", "order"}


# ---------------------------------------------------------------------------
# Fake remote store
# ---------------------------------------------------------------------------


class FakeRemoteStore:
    """Minimal PostgREST-like store: equality filters, upsert, patch, delete."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {
            "tasks": [],
            "classes": [],
            "task_types": [],
        }
        self.requests: list[httpx.Request] = []
        self.failures: dict[tuple[str, str], int] = {}

    def fail(self, method: str, table: str, status_code: int = 500) -> None:
        """Make every ``method`` request on ``table`` answer ``status_code``."""
        self.failures[(method, table)] = status_code

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        """(method, table) of the recorded requests, in order."""
        result = []
        for request in self.requests:
            table = request.url.path.rsplit("/", 1)[-1]
            if method is None or request.method == method:
                result.append((request.method, table))
        return result

    @staticmethod
    def _matches(row: dict[str, Any], params: httpx.QueryParams) -> bool:
        for column, value in params.items():
            if column in CONTROL_PARAMS:
                continue
            expected = value.removeprefix("eq.")
            if str(row.get(column)) != expected:
                return False
        return True

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        status = self.failures.get((request.method, table))
        if status is not None:
            return httpx.Response(status, json={"message": "injected failure"})

        rows = self.tables.setdefault(table, [])
        params = request.url.params

        if request.method == "GET":
            selected = [row for row in rows if self._matches(row, params)]
            if "limit" in params:
                selected = selected[: int(params["limit"])]
            columns = params.get("select", "*")
            if columns != "*":
                wanted = columns.split(",")
                selected = [{c: row.get(c) for c in wanted} for row in selected]
            return httpx.Response(200, json=selected)

        if request.method == "POST":
            body = json.loads(request.content)
            stored = []
            for incoming in body:
                for index, row in enumerate(rows):
                    if row.get("id") == incoming.get("id"):
                        rows[index] = {**row, **incoming}
                        stored.append(rows[index])
                        break
                else:
                    rows.append(dict(incoming))
                    stored.append(incoming)
            return httpx.Response(201, json=stored)

        if request.method == "PATCH":
            values = json.loads(request.content)
            updated = []
            for index, row in enumerate(rows):
                if self._matches(row, params):
                    rows[index] = {**row, **values}
                    updated.append(rows[index])
            return httpx.Response(200, json=updated)

        if request.method == "DELETE":
            removed = [row for row in rows if self._matches(row, params)]
            self.tables[table] = [row for row in rows if not self._matches(row, params)]
            return httpx.Response(200, json=removed)

        return httpx.Response(405)


@pytest.fixture()
def remote():
    """Provide an empty fake remote store."""
    return FakeRemoteStore()


def make_client(remote: FakeRemoteStore, token: str | None = "session-token") -> RemoteStoreClient:
    config = RemoteConfig(url=REMOTE_URL, api_key="anon-key", retry=0)
    return RemoteStoreClient(config, token, transport=httpx.MockTransport(remote.handler))


@pytest.fixture()
def remote_client(remote):
    """RemoteStoreClient talking to the fake remote store."""
    return make_client(remote)


@pytest.fixture()
def memory_store():
    """Empty in-memory entity store."""
    return MemoryEntityStore()


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_caches so each test gets fresh service instances.
    """
    from studyplan_cli.adapters.sqlite.connection import DatabaseConnection
    from studyplan_cli.services.config_service import get_config_service
    from studyplan_cli.services.context_manager import get_planner_context

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    get_planner_context.cache_clear()
    with patch("studyplan_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("studyplan_cli.services.config_service.user_data_dir", return_value=tmpdir):
            yield get_config_service()
    get_config_service.cache_clear()
    get_planner_context.cache_clear()
    DatabaseConnection.close_all()


@pytest.fixture()
def cli_env(tmp_config, remote):
    """Config in tmp_path, remote URL configured, remote store faked.

    Yields the fake remote store.
    """
    tmp_config.set("remote.url", REMOTE_URL)
    tmp_config.set("remote.retry", 0)

    def _client(config, access_token=None):
        return RemoteStoreClient(
            config, access_token, transport=httpx.MockTransport(remote.handler)
        )

    with patch("studyplan_cli.services.context_manager.RemoteStoreClient", side_effect=_client):
        yield remote
