"""Core relay plugin support."""

from .base import Plugin
from .manager import (
    PLUGIN_NAMESPACE,
    PluginManager,
    PluginRecord,
    PluginState,
    build_plugin_resolver,
)

__all__ = [
    "Plugin",
    "PluginManager",
    "PluginRecord",
    "PluginState",
    "PLUGIN_NAMESPACE",
    "build_plugin_resolver",
]
