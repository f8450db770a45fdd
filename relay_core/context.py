"""Context objects shared between the orchestrator, plugins and tasks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence


class PluginContext(ABC):
    """Read-only view of the project handed to plugins on activation."""

    @abstractmethod
    def classpaths(self) -> tuple[Path, ...]:
        """Return project source roots, target directory excluded."""

    @abstractmethod
    def target_dir(self) -> Path:
        """Return the directory where artifacts are built."""

    @abstractmethod
    def config_value(self, key: str) -> Any:
        """Return the configuration slice stored under ``key``."""

    @abstractmethod
    def require_task(self, identifier: str) -> Any:
        """Return the memoized task handle for ``identifier`` or ``None``."""

    @abstractmethod
    def terminate(self) -> None:
        """Ask the orchestrator to finish the session."""


@dataclass(frozen=True)
class ProjectContext(PluginContext):
    """Context created once at startup and kept for the process lifetime."""

    paths: tuple[Path, ...]
    target: Path
    config: Mapping[str, Any] = field(default_factory=dict)
    task_lookup: Callable[[str], Any] | None = field(default=None, repr=False)
    on_terminate: Callable[[], Any] | None = field(default=None, repr=False)

    def classpaths(self) -> tuple[Path, ...]:
        return self.paths

    def target_dir(self) -> Path:
        return self.target

    def config_value(self, key: str) -> Any:
        return self.config.get(str(key))

    def require_task(self, identifier: str) -> Any:
        if self.task_lookup is None:
            return None
        return self.task_lookup(identifier)

    def terminate(self) -> None:
        if self.on_terminate is not None:
            self.on_terminate()


class ContextMap(dict):
    """Pipeline context; the marker that tells a context apart from task input."""

    def assoc(self, **values: Any) -> "ContextMap":
        """Return a copy updated with ``values``."""

        updated = ContextMap(self)
        updated.update(values)
        return updated


def as_context(value: Mapping[str, Any] | None) -> ContextMap:
    if isinstance(value, ContextMap):
        return value
    return ContextMap(value or {})


@dataclass(frozen=True)
class Keyword:
    """Control keyword passed to a task instead of regular input."""

    name: str

    def __str__(self) -> str:
        return f":{self.name}"


DESCRIBE = Keyword("describe")


def collect_classpaths(target: Path, roots: Sequence[Path]) -> tuple[Path, ...]:
    """Return existing source roots with the target directory excluded."""

    target_path = Path(target).resolve()
    seen: list[Path] = []
    for root in roots:
        path = Path(root).resolve()
        if path == target_path or not path.is_dir() or path in seen:
            continue
        seen.append(path)
    return tuple(seen)
