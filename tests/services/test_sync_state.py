"""Tests for sync state manager."""

# pylint: disable=redefined-outer-name

from datetime import UTC, datetime, timedelta, timezone

import pytest

from studyplan_cli.repositories import LAST_SYNC_KEY
from studyplan_cli.services.sync_state import SyncState


@pytest.fixture
def sync_state(memory_store):
    """Create a sync state instance over an in-memory store."""
    return SyncState(memory_store)


def test_initial_state(sync_state):
    """Test initial state is empty."""
    assert sync_state.get_last_sync() is None


def test_set_and_get_last_sync(sync_state):
    """Test setting and getting last sync time."""
    now = datetime.now(UTC)

    sync_state.set_last_sync(now)

    retrieved = sync_state.get_last_sync()
    assert retrieved is not None
    # Stored with millisecond precision
    assert abs((retrieved - now).total_seconds()) < 0.001


def test_set_last_sync_without_timestamp(sync_state):
    """Test setting last sync with automatic timestamp."""
    before = datetime.now(UTC) - timedelta(milliseconds=1)
    sync_state.set_last_sync()
    after = datetime.now(UTC)

    retrieved = sync_state.get_last_sync()
    assert before <= retrieved <= after


def test_stored_format(sync_state, memory_store):
    """The marker uses the millisecond UTC format of the web planner."""
    sync_state.set_last_sync(datetime(2024, 3, 1, 12, 30, 5, 123456, tzinfo=UTC))
    assert memory_store.get_local_data(LAST_SYNC_KEY) == "2024-03-01T12:30:05.123Z"


def test_offset_timestamp_converted_to_utc(sync_state, memory_store):
    eastern = timezone(timedelta(hours=-5))
    sync_state.set_last_sync(datetime(2024, 3, 1, 7, 0, tzinfo=eastern))
    assert memory_store.get_local_data(LAST_SYNC_KEY) == "2024-03-01T12:00:00.000Z"


def test_naive_stored_value_read_as_utc(sync_state, memory_store):
    memory_store.save_local_data(LAST_SYNC_KEY, "2024-03-01T12:00:00")
    assert sync_state.get_last_sync() == datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def test_clear_last_sync(sync_state):
    """Test clearing last sync time."""
    sync_state.set_last_sync()
    sync_state.clear_last_sync()
    assert sync_state.get_last_sync() is None
