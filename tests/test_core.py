"""Core runtime tests for configuration, paths and events."""

from __future__ import annotations

from pathlib import Path

import pytest

from relay_core.config import load_config, locate_config
from relay_core.context import ContextMap, ProjectContext, as_context, collect_classpaths
from relay_core.events import STANDARD_EVENTS, EventBus
from relay_core.paths import UserDirs


def test_load_config_reads_identifier_tables(tmp_path: Path) -> None:
    config = tmp_path / "relay.toml"
    config.write_text('["relay_builtin.tasks/info"]\nversion = "1.0"\n')

    data = load_config(config)

    assert data == {"relay_builtin.tasks/info": {"version": "1.0"}}
    ctx = ProjectContext(paths=(), target=tmp_path, config=data)
    assert ctx.config_value("relay_builtin.tasks/info") == {"version": "1.0"}
    assert ctx.config_value("relay_builtin.tasks/aot") is None


def test_load_config_falls_back_to_user_dir(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "relay.toml").write_text("[x]\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RELAY_CONFIG", raising=False)
    dirs = UserDirs(config_dir_override=user_dir)

    assert locate_config(user_dirs=dirs) == user_dir / "relay.toml"
    assert load_config("relay.toml", user_dirs=dirs) == {"x": {}}


def test_load_config_missing_or_malformed(tmp_path: Path) -> None:
    dirs = UserDirs(config_dir_override=tmp_path / "user")
    assert load_config(tmp_path / "absent.toml", user_dirs=dirs) is None
    broken = tmp_path / "broken.toml"
    broken.write_text("[unterminated\n")
    assert load_config(broken, user_dirs=dirs) is None


def test_collect_classpaths_excludes_target(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "target").mkdir()
    roots = [tmp_path / "src", tmp_path / "target", tmp_path / "absent", tmp_path / "src"]
    assert collect_classpaths(tmp_path / "target", roots) == ((tmp_path / "src").resolve(),)


def test_context_map_helpers() -> None:
    ctx = as_context({"a": 1})
    assert isinstance(ctx, ContextMap)
    assert as_context(ctx) is ctx
    assert ctx.assoc(b=2) == {"a": 1, "b": 2}
    assert ctx == {"a": 1}


def test_event_handlers_run_in_priority_order() -> None:
    bus = EventBus()
    seen: list[str] = []

    def make_handler(label: str):
        def handler(event):
            seen.append(f"{label}:{event.payload['value']}")

        return handler

    bus.on("task.resolved", make_handler("one"))
    bus.on("task.resolved", make_handler("two"))
    bus.on("task.resolved", make_handler("high"), priority=5)
    bus.emit("task.resolved", {"value": "ok"})

    assert seen == ["high:ok", "one:ok", "two:ok"]
    assert "status.changed" in STANDARD_EVENTS
