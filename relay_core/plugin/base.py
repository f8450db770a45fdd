"""Abstract base class for plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from relay_core.context import PluginContext


class Plugin(ABC):
    """A long-living session component such as a REPL server or file watcher."""

    @abstractmethod
    def activate(self, ctx: PluginContext) -> Any:
        """Start the plugin; a non-``None`` result is handed back on deactivation."""

    def deactivate(self, result: Any) -> None:
        """Stop the plugin, receiving its own activation result (or ``None``)."""
