"""Tests for plugin creation, activation and deactivation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from relay_core.context import PluginContext, ProjectContext
from relay_core.events import PLUGIN_ACTIVATED, EventBus
from relay_core.plugin import Plugin, PluginManager, PluginState, build_plugin_resolver
from relay_core.registry import FactoryRegistry


class RecordingPlugin(Plugin):
    def __init__(self, name: str, config: Any, journal: list[tuple[str, ...]], result: Any = None) -> None:
        self.name = name
        self.config = config
        self.journal = journal
        self.result = result

    def activate(self, ctx: PluginContext) -> Any:
        self.journal.append(("activate", self.name))
        return self.result

    def deactivate(self, result: Any) -> None:
        self.journal.append(("deactivate", self.name, result))


class FailingPlugin(Plugin):
    def activate(self, ctx: PluginContext) -> Any:
        raise RuntimeError("misconfigured")


def _manager(journal: list[tuple[str, ...]], events: EventBus | None = None) -> PluginManager:
    factories = FactoryRegistry("plugin")
    factories.register("relay_plugins/one", lambda cfg: RecordingPlugin("one", cfg, journal, result="srv"))
    factories.register("relay_plugins/two", lambda cfg: RecordingPlugin("two", cfg, journal))
    factories.register("ext.plugins/three", lambda cfg: RecordingPlugin("three", cfg, journal, result=3))
    factories.register("relay_plugins/failing", lambda cfg: FailingPlugin())
    return PluginManager(build_plugin_resolver(factories), events)


def _ctx(tmp_path: Path) -> ProjectContext:
    return ProjectContext(paths=(tmp_path,), target=tmp_path / "target")


def test_plugins_are_created_in_listed_order_with_their_config() -> None:
    journal: list[tuple[str, ...]] = []
    manager = _manager(journal)
    config = {"relay_plugins/two": {"port": 1}, "ext.plugins/three": {"x": True}}

    plugins = manager.create_plugins(["two", "ext.plugins/three", "one"], config)

    assert [plugin.name for plugin in plugins] == ["two", "three", "one"]
    assert [plugin.config for plugin in plugins] == [{"port": 1}, {"x": True}, None]
    assert journal == []


def test_unknown_or_malformed_plugins_are_skipped() -> None:
    manager = _manager([])
    plugins = manager.create_plugins(["one", "ext.none/missing", " ", "one"], {})
    assert [plugin.name for plugin in plugins] == ["one"]


def test_activation_records_only_present_results(tmp_path: Path) -> None:
    journal: list[tuple[str, ...]] = []
    events = EventBus()
    activated: list[str] = []
    events.on(PLUGIN_ACTIVATED, lambda event: activated.append(event.payload["plugin_id"]))
    manager = _manager(journal, events)
    manager.create_plugins(["one", "two", "ext.plugins/three"], {})

    results = manager.activate_all(_ctx(tmp_path))

    assert journal == [("activate", "one"), ("activate", "two"), ("activate", "three")]
    assert results == {"relay_plugins/one": "srv", "ext.plugins/three": 3}
    assert activated == ["relay_plugins/one", "relay_plugins/two", "ext.plugins/three"]
    assert all(record.state is PluginState.ACTIVE for record in manager.plugin_records())
    assert manager.active


def test_activation_failure_propagates(tmp_path: Path) -> None:
    journal: list[tuple[str, ...]] = []
    manager = _manager(journal)
    manager.create_plugins(["one", "failing", "two"], {})

    with pytest.raises(RuntimeError, match="misconfigured"):
        manager.activate_all(_ctx(tmp_path))
    assert journal == [("activate", "one")]


def test_deactivation_passes_own_result_once(tmp_path: Path) -> None:
    journal: list[tuple[str, ...]] = []
    manager = _manager(journal)
    manager.create_plugins(["one", "two"], {})
    manager.activate_all(_ctx(tmp_path))
    journal.clear()

    assert manager.deactivate_all() is True
    assert manager.deactivate_all() is False
    assert journal == [("deactivate", "one", "srv"), ("deactivate", "two", None)]
    assert not manager.active
