"""Core runtime of the relay build orchestrator."""

from .app import EXIT_SUCCESS, RelayApp
from .config import load_config, locate_config
from .context import (
    DESCRIBE,
    ContextMap,
    Keyword,
    PluginContext,
    ProjectContext,
)
from .errors import (
    ContextUnavailableError,
    InvalidIdentifier,
    LoadError,
    PluginInitError,
    RelayError,
    TaskInitError,
    UnsupportedControlArgument,
)
from .events import Event, EventBus
from .plugin import Plugin, PluginManager
from .status import SessionStatus, Status
from .task import Task, TaskHandle, TaskRegistry, chain, compose

__all__ = [
    "RelayApp",
    "EXIT_SUCCESS",
    "load_config",
    "locate_config",
    "DESCRIBE",
    "ContextMap",
    "Keyword",
    "PluginContext",
    "ProjectContext",
    "RelayError",
    "InvalidIdentifier",
    "LoadError",
    "TaskInitError",
    "PluginInitError",
    "UnsupportedControlArgument",
    "ContextUnavailableError",
    "Event",
    "EventBus",
    "Plugin",
    "PluginManager",
    "SessionStatus",
    "Status",
    "Task",
    "TaskHandle",
    "TaskRegistry",
    "chain",
    "compose",
]
