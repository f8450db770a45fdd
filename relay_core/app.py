"""Application object that wires registries, plugins, tasks and session status."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import relay_builtin.tasks
import relay_plugins
from relay_core.context import ContextMap, ProjectContext, collect_classpaths
from relay_core.events import EventBus
from relay_core.plugin import PluginManager, build_plugin_resolver
from relay_core.registry import FactoryEntry, FactoryRegistry
from relay_core.registry.resolver import Importer
from relay_core.status import SessionStatus, ShutdownHook, Status
from relay_core.task import (
    TaskHandle,
    TaskRegistry,
    build_task_resolver,
    run_from_spec,
)

EXIT_SUCCESS = 0


class RelayApp:
    """Entry point that glues configuration, plugins, tasks and the session status.

    ``start`` creates the configured plugins, publishes the project context,
    activates plugins in order and marks the session initialized. Whatever
    triggers termination first (``terminate``, a signal or interpreter exit)
    deactivates plugins and halts the process; later triggers do nothing.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        target: Path | str = "target",
        sources: Sequence[Path | str] | None = None,
        events: EventBus | None = None,
        importer: Importer | None = None,
        halt: Callable[[int], Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("relay_core.app")
        self.config = dict(config or {})
        self.target = Path(target)
        self.sources = [Path(source) for source in (sources or [Path.cwd()])]
        self.events = events or EventBus()
        self.status = SessionStatus(self.events)
        self.shutdown_hook = ShutdownHook(self.status)
        self._halt = halt or os._exit

        resolver_args: dict[str, Any] = {"importer": importer} if importer else {}
        self.task_factories = FactoryRegistry("task")
        self.plugin_factories = FactoryRegistry("plugin")
        self.task_resolver = build_task_resolver(self.task_factories, **resolver_args)
        self.plugin_resolver = build_plugin_resolver(self.plugin_factories, **resolver_args)
        self.task_resolver.install(relay_builtin.tasks)
        self.plugin_resolver.install(relay_plugins)

        self.context: ProjectContext | None = None
        self.tasks = TaskRegistry(self.task_resolver, lambda: self.context, self.events)
        self.plugin_manager = PluginManager(self.plugin_resolver, self.events)
        self.status.on_terminated(self._finalize)

    def register_task(
        self,
        identifier: str,
        factory: Callable[..., Any],
        *,
        origin: str = "extension",
    ) -> FactoryEntry:
        """Make an extension task available under ``identifier``."""

        return self.task_factories.register(identifier, factory, origin=origin)

    def register_plugin(
        self,
        identifier: str,
        factory: Callable[..., Any],
        *,
        origin: str = "extension",
    ) -> FactoryEntry:
        """Make an extension plugin available under ``identifier``."""

        return self.plugin_factories.register(identifier, factory, origin=origin)

    def start(
        self,
        plugins: Sequence[str] = (),
        *,
        install_hooks: bool = True,
    ) -> ProjectContext:
        """Create and activate plugins, then mark the session initialized."""

        self.plugin_manager.create_plugins(plugins, self.config)
        if install_hooks:
            self.shutdown_hook.install()

        self.context = ProjectContext(
            paths=collect_classpaths(self.target, self.sources),
            target=self.target,
            config=self.config,
            task_lookup=self.tasks.require,
            on_terminate=self.terminate,
        )
        self.plugin_manager.activate_all(self.context)
        self.status.initialize()
        return self.context

    def require_task(self, identifier: str) -> TaskHandle | None:
        return self.tasks.require(identifier)

    def run_tasks(self, tasks: str) -> ContextMap:
        """Run a ``task1,task2:opt=val`` pipeline and return the final context."""

        return run_from_spec(self.tasks, tasks)

    def terminate(self) -> bool:
        return self.status.terminate()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the session is terminated by a plugin, a signal or ``terminate``."""

        return self.status.wait_terminated(timeout)

    @property
    def terminated(self) -> bool:
        return self.status.state is Status.TERMINATED

    def _finalize(self) -> None:
        self.plugin_manager.deactivate_all()
        self.logger.debug("session finished")
        self._halt(EXIT_SUCCESS)
