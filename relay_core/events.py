"""Simple event bus used to observe the orchestration lifecycle."""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, DefaultDict

__all__ = ["Event", "EventHandler", "EventBus", "STANDARD_EVENTS"]

PLUGIN_CREATED = "plugin.created"
PLUGIN_ACTIVATED = "plugin.activated"
PLUGIN_DEACTIVATED = "plugin.deactivated"
TASK_RESOLVED = "task.resolved"
STATUS_CHANGED = "status.changed"

STANDARD_EVENTS = (
    PLUGIN_CREATED,
    PLUGIN_ACTIVATED,
    PLUGIN_DEACTIVATED,
    TASK_RESOLVED,
    STATUS_CHANGED,
)


@dataclass(frozen=True)
class Event:
    """Lightweight event descriptor."""

    name: str
    payload: dict[str, Any]


EventHandler = Callable[[Event], None]


@dataclass(frozen=True)
class _EventSubscription:
    priority: int
    order: int
    handler: EventHandler


class EventBus:
    """Synchronous event bus with deterministic delivery.

    Handlers run on the emitting thread; status changes may be emitted from
    a signal handler or the interpreter's exit hooks.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[str, list[_EventSubscription]] = defaultdict(list)
        self._sequence: DefaultDict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def on(self, event_name: str, handler: EventHandler, priority: int = 0) -> None:
        """Register a handler for `event_name` with optional priority."""
        with self._lock:
            order = self._sequence[event_name]
            self._sequence[event_name] = order + 1
            self._handlers[event_name].append(
                _EventSubscription(priority=priority, order=order, handler=handler)
            )

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        event = Event(event_name, payload)
        with self._lock:
            subscriptions = sorted(
                self._handlers[event_name],
                key=lambda item: (-item.priority, item.order),
            )
        for subscription in subscriptions:
            subscription.handler(event)
