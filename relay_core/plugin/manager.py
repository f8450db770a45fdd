"""Plugin creation, activation and deactivation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from relay_core.context import PluginContext
from relay_core.errors import PluginInitError
from relay_core.events import (
    PLUGIN_ACTIVATED,
    PLUGIN_CREATED,
    PLUGIN_DEACTIVATED,
    EventBus,
)
from relay_core.registry import FactoryRegistry, IdentifierResolver, qualify

from .base import Plugin

PLUGIN_NAMESPACE = "relay_plugins"


class PluginState(Enum):
    """Lifecycle states for plugins."""

    CREATED = "created"
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


@dataclass
class PluginRecord:
    """Snapshot of a created plugin."""

    id: str
    plugin: Plugin
    state: PluginState = PluginState.CREATED
    result: Any = None


def build_plugin_resolver(
    registry: FactoryRegistry | None = None,
    **kwargs: Any,
) -> IdentifierResolver:
    return IdentifierResolver(
        registry or FactoryRegistry("plugin"),
        register_hook="register_plugins",
        initializer="init_plugin",
        error_type=PluginInitError,
        **kwargs,
    )


class PluginManager:
    """Create plugins in listed order and drive their activation lifecycle.

    Activation is sequential and exceptions raised by ``activate`` propagate
    to the caller; a broken plugin aborts startup. Deactivation happens at
    most once per manager.
    """

    def __init__(
        self,
        resolver: IdentifierResolver,
        events: EventBus | None = None,
    ) -> None:
        self.resolver = resolver
        self.events = events or EventBus()
        self._logger = logging.getLogger(__name__)
        self._records: list[PluginRecord] = []
        self._lock = threading.Lock()
        self._deactivated = False

    def create_plugins(
        self,
        names: Sequence[str],
        config: Mapping[str, Any],
        *,
        namespace: str = PLUGIN_NAMESPACE,
    ) -> tuple[Plugin, ...]:
        """Resolve each configured plugin, passing it its own config slice."""

        for name in names:
            if not name.strip():
                continue
            qualified = qualify(name, namespace)
            self._logger.debug("loading plugin %s", qualified)
            if any(record.id == qualified for record in self._records):
                self._logger.warning("plugin %s listed more than once", qualified)
                continue
            plugin = self.resolver.resolve(qualified, config.get(qualified))
            if plugin is None:
                continue
            self._records.append(PluginRecord(id=qualified, plugin=plugin))
            self.events.emit(PLUGIN_CREATED, {"plugin_id": qualified})
        return self.plugins()

    def plugins(self) -> tuple[Plugin, ...]:
        return tuple(record.plugin for record in self._records)

    def plugin_records(self) -> tuple[PluginRecord, ...]:
        return tuple(self._records)

    def results(self) -> dict[str, Any]:
        """Return recorded activation results keyed by plugin identifier."""

        with self._lock:
            return {
                record.id: record.result
                for record in self._records
                if record.result is not None
            }

    def activate_all(self, ctx: PluginContext) -> dict[str, Any]:
        """Activate plugins one after another in listed order."""

        for record in self._records:
            if record.state is not PluginState.CREATED:
                continue
            result = record.plugin.activate(ctx)
            with self._lock:
                record.state = PluginState.ACTIVE
                if result is not None:
                    record.result = result
            self.events.emit(PLUGIN_ACTIVATED, {"plugin_id": record.id})
        return self.results()

    def deactivate_all(self) -> bool:
        """Deactivate every created plugin once, passing its own result."""

        with self._lock:
            if self._deactivated:
                return False
            self._deactivated = True
            records = list(self._records)

        for record in records:
            if record.state is PluginState.DEACTIVATED:
                continue
            self._logger.debug("deactivating plugin %s", record.id)
            try:
                record.plugin.deactivate(record.result)
            except Exception:
                self._logger.exception("plugin %s failed to deactivate", record.id)
            record.state = PluginState.DEACTIVATED
            self.events.emit(PLUGIN_DEACTIVATED, {"plugin_id": record.id})
        return True

    @property
    def active(self) -> bool:
        return any(record.state is PluginState.ACTIVE for record in self._records)
