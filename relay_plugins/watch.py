"""Polling file watcher routing changes to tasks as notifications."""

from __future__ import annotations

import fnmatch
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from relay_core.context import PluginContext
from relay_core.plugin import Plugin
from relay_core.registry import qualify
from relay_core.task import TASK_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


def _patterns(value: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def matches(relative: Path, patterns: Iterable[str]) -> bool:
    posix = relative.as_posix()
    return any(
        fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(relative.name, pattern)
        for pattern in patterns
    )


class Watcher:
    """Tracks file modification times under the source roots."""

    def __init__(
        self,
        ctx: PluginContext,
        routes: Mapping[str, tuple[str, ...]],
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self.ctx = ctx
        self.routes = dict(routes)
        self.interval = interval
        self._target = Path(ctx.target_dir()).resolve()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._snapshot = self._scan()

    def _scan(self) -> dict[Path, float]:
        snapshot: dict[Path, float] = {}
        for root in self.ctx.classpaths():
            for path in Path(root).rglob("*"):
                if not path.is_file():
                    continue
                resolved = path.resolve()
                if resolved.is_relative_to(self._target):
                    continue
                try:
                    snapshot[resolved] = path.stat().st_mtime
                except OSError:
                    continue
        return snapshot

    def poll(self) -> list[Path]:
        """Rescan and return paths created or modified since the last scan."""

        current = self._scan()
        changed = [
            path
            for path, mtime in current.items()
            if self._snapshot.get(path) != mtime
        ]
        self._snapshot = current
        return sorted(changed)

    def _relative(self, path: Path) -> Path:
        for root in self.ctx.classpaths():
            root = Path(root).resolve()
            if path.is_relative_to(root):
                return path.relative_to(root)
        return Path(path.name)

    def dispatch(self, paths: Iterable[Path]) -> int:
        """Notify routed tasks about ``paths``; returns the number of notifications."""

        notified = 0
        for path in paths:
            relative = self._relative(path)
            for task_id, patterns in self.routes.items():
                if not matches(relative, patterns):
                    continue
                handle = self.ctx.require_task(task_id)
                if handle is None:
                    continue
                logger.info("%s changed, notifying %s", relative, task_id)
                try:
                    handle(path)
                except Exception:
                    logger.exception("task %s failed to handle %s", task_id, path)
                notified += 1
        return notified

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.dispatch(self.poll())

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="relay-watch", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval * 2)


class WatchPlugin(Plugin):
    """Watches the source roots and notifies tasks about changed files."""

    def __init__(self, config: Mapping[str, Any] | None) -> None:
        config = config or {}
        self.interval = float(config.get("interval", DEFAULT_INTERVAL))
        self.routes = {
            qualify(task_id, TASK_NAMESPACE): _patterns(patterns)
            for task_id, patterns in dict(config.get("on_change", {})).items()
        }

    def activate(self, ctx: PluginContext) -> Watcher | None:
        if not self.routes:
            logger.warning("nothing to watch, no on_change routes configured")
            return None
        watcher = Watcher(ctx, self.routes, self.interval)
        watcher.start()
        logger.info("watching %s", ", ".join(str(path) for path in ctx.classpaths()))
        return watcher

    def deactivate(self, result: Any) -> None:
        if result is not None:
            result.stop()


def init_plugin(config: Mapping[str, Any] | None) -> WatchPlugin:
    return WatchPlugin(config)
