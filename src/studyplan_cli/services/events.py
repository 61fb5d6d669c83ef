"""Explicit publish/subscribe channel for planner refresh signals.

Mutators publish ``calendar-update`` after a task changes; views subscribe and
re-read their data.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from studyplan_cli.utils.logger import get_logger

logger = get_logger("events")

CALENDAR_UPDATE = "calendar-update"

Listener = Callable[[Any], None]


class EventBus:
    """Synchronous in-process event channel."""

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``event``.

        Returns:
            A callable that removes the subscription
        """
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event]:
                self._listeners[event].remove(listener)

        return unsubscribe

    def publish(self, event: str, payload: Any = None) -> None:
        """Call every listener of ``event`` in subscription order.

        A failing listener is logged and does not stop the others.
        """
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(payload)
            except Exception:
                logger.exception("listener for '%s' failed", event)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
