"""Lazily created, memoized task handles."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable

from relay_core.context import PluginContext
from relay_core.errors import ContextUnavailableError, TaskInitError
from relay_core.events import TASK_RESOLVED, EventBus
from relay_core.registry import FactoryRegistry, Identifier, IdentifierResolver

from .handle import TaskHandle

TASK_NAMESPACE = "relay_builtin.tasks"

ContextProvider = Callable[[], "PluginContext | None"]


def build_task_resolver(
    registry: FactoryRegistry | None = None,
    **kwargs: Any,
) -> IdentifierResolver:
    return IdentifierResolver(
        registry or FactoryRegistry("task"),
        register_hook="register_tasks",
        initializer="init_task",
        error_type=TaskInitError,
        **kwargs,
    )


class TaskRegistry:
    """Resolve task identifiers into handles, once per identifier.

    The first ``require`` of an identifier reads options, classpaths and the
    target directory from the current context and calls the factory; every
    later call returns the same handle, or ``None`` when the first attempt
    failed. Construction is serialized per identifier, reads of cached
    handles never wait on another identifier's factory.
    """

    def __init__(
        self,
        resolver: IdentifierResolver,
        context_provider: ContextProvider,
        events: EventBus | None = None,
    ) -> None:
        self.resolver = resolver
        self.context_provider = context_provider
        self.events = events or EventBus()
        self._logger = logging.getLogger(__name__)
        self._cache: dict[str, TaskHandle | None] = {}
        self._building: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def require(self, identifier: str | Identifier) -> TaskHandle | None:
        key = str(identifier).strip()
        with self._lock:
            if key in self._cache:
                return self._cache[key]
            key_lock = self._building.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._cache:
                    return self._cache[key]
            handle = self._create(key)
            with self._lock:
                self._cache[key] = handle
                self._building.pop(key, None)
        return handle

    def _create(self, key: str) -> TaskHandle | None:
        ctx = self.context_provider()
        if ctx is None:
            raise ContextUnavailableError(
                f"task {key} required before the project context was set"
            )
        self._logger.debug("initializing task %s", key)
        task = self.resolver.resolve(
            key,
            ctx.config_value(key) or {},
            ctx.classpaths(),
            ctx.target_dir(),
        )
        if task is None:
            return None
        self.events.emit(TASK_RESOLVED, {"task_id": key})
        return TaskHandle(key, task)

    def require_all(self, identifiers: Iterable[str]) -> dict[str, TaskHandle]:
        """Return handles keyed by short name for identifiers that resolved."""

        handles: dict[str, TaskHandle] = {}
        for identifier in identifiers:
            handle = self.require(identifier)
            if handle is not None:
                handles[str(identifier).rpartition("/")[2]] = handle
        return handles

    def cached(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(key for key, handle in self._cache.items() if handle is not None)
