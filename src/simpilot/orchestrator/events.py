"""
Synchronous named-event feed for session and execution notifications.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[[dict[str, Any]], Any]


class OrchestratorEvent(StrEnum):
    """Events emitted by the orchestrator."""

    SESSION_CREATED = "session_created"
    SESSION_TERMINATED = "session_terminated"
    SESSION_ACTIVATED = "session_activated"
    SESSION_DEACTIVATED = "session_deactivated"
    COMMAND_EXECUTED = "command_executed"


class EventFeed:
    """
    Maps event names to ordered listener lists.

    Listeners run synchronously in registration order. A listener that
    raises is logged and skipped; the remaining listeners still run.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._log = logger.bind(component="event_feed")

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[str(event)].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        """Remove one registration of ``listener``; unknown listeners are ignored."""
        listeners = self._listeners.get(str(event))
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        for listener in list(self._listeners.get(str(event), ())):
            try:
                listener(payload)
            except Exception as e:
                self._log.warning("Event listener failed", event_name=str(event), error=str(e))

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(str(event), ()))

    def clear(self) -> None:
        self._listeners.clear()
