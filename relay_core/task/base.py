"""Abstract base class for tasks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Any, Mapping


class Task(ABC):
    """A pipeline step bound to its options, classpaths and target directory."""

    @abstractmethod
    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        """Run the task with input data and the pipelined context."""

    def notify(self, path: PurePath, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        """Handle a file change notification; reruns the task by default."""

        return self.invoke(None, ctx)

    @abstractmethod
    def describe(self) -> str:
        """Return a human readable task description."""
