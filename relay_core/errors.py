"""Error types raised by the relay orchestration core."""

from __future__ import annotations


class RelayError(Exception):
    """Base type for orchestration failures."""


class InvalidIdentifier(RelayError):
    """Raised when an identifier lacks its namespace part."""

    def __init__(self, text: str) -> None:
        super().__init__(f"wrong identifier {text!r}, qualified identifier required")
        self.text = text


class LoadError(RelayError):
    """Raised when the code unit named by an identifier cannot be loaded."""


class TaskInitError(LoadError):
    """Raised when a task factory cannot produce a task."""


class PluginInitError(LoadError):
    """Raised when a plugin factory cannot produce a plugin."""


class UnsupportedControlArgument(RelayError):
    """Raised when a task is called with a keyword it does not recognize."""


class ContextUnavailableError(RelayError):
    """Raised when tasks are resolved before the project context exists."""
