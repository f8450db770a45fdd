"""Tests for the built-in leaf tasks."""

from __future__ import annotations

import json
import logging
import sys
import zipfile
from pathlib import Path
from types import SimpleNamespace

import pytest

from relay_builtin.tasks import aot, clean, docs, info, package, testing
from relay_builtin.tasks.options import as_bool, as_list
from relay_core.context import ProjectContext
from relay_core.registry import FactoryRegistry
from relay_core.task import TaskRegistry, build_task_resolver, run_from_spec

import relay_builtin.tasks


def _project(tmp_path: Path) -> tuple[Path, Path]:
    src = tmp_path / "src"
    pkg = src / "demo"
    pkg.mkdir(parents=True)
    (pkg / "__init__.py").write_text('"""Demo package."""\n')
    (pkg / "__main__.py").write_text("print('demo')\n")
    (pkg / "core.py").write_text("def answer():\n    return 42\n")
    return src, tmp_path / "target"


def test_clean_recreates_target(tmp_path: Path) -> None:
    src, target = _project(tmp_path)
    (target / "old").mkdir(parents=True)

    ctx = clean.create({}, (src,), target).invoke(None, {"prior": 1})

    assert ctx == {"prior": 1, "cleaned": True}
    assert target.is_dir()
    assert list(target.iterdir()) == []


def test_clean_refuses_target_containing_sources(tmp_path: Path) -> None:
    src, _ = _project(tmp_path)
    with pytest.raises(ValueError):
        clean.invoke({}, {}, (src,), tmp_path)
    assert src.is_dir()


def test_info_merges_options_and_writes_file(tmp_path: Path) -> None:
    _, target = _project(tmp_path)
    task = info.create({"name": "demo", "version": "0.1"}, (), target)

    ctx = task.invoke({"version": "1.2"}, {"prior": 1})

    assert ctx["name"] == "demo"
    assert ctx["version"] == "1.2"
    assert ctx["prior"] == 1
    assert "build_time" in ctx
    written = json.loads((target / info.INFO_FILE).read_text())
    assert written["version"] == "1.2"


def test_aot_compiles_sources(tmp_path: Path) -> None:
    src, target = _project(tmp_path)

    ctx = aot.create({}, (src,), target).invoke(None, {})

    assert ctx["aot"] is True
    assert sorted(ctx["aot_modules"]) == ["demo", "demo.__main__", "demo.core"]
    assert (target / "classes" / "demo" / "core.pyc").is_file()


def test_docs_writes_html_pages(tmp_path: Path) -> None:
    src, target = _project(tmp_path)

    ctx = docs.create({}, (src,), target).invoke(None, {})

    page = target / "docs" / "demo.html"
    assert ctx["docs"] == [str(page)]
    assert "Demo package." in page.read_text(encoding="utf-8")
    assert str(src) not in sys.path


def test_package_builds_zipapp(tmp_path: Path) -> None:
    src, target = _project(tmp_path)
    task = package.create({"main": "demo.core:answer"}, (src,), target)

    ctx = task.invoke(None, {"name": "demo", "version": "1.2"})

    archive = Path(ctx["package"])
    assert archive == target.resolve() / "dist" / "demo-1.2.pyz"
    with zipfile.ZipFile(archive) as bundle:
        names = bundle.namelist()
    assert "demo/core.py" in names
    assert "__main__.py" in names


def test_test_task_runs_runner_with_options() -> None:
    calls: list[list[str]] = []
    runner = SimpleNamespace(main=lambda args: calls.append(args) or 1)
    task = testing.TestTask({"paths": "tests/unit", "markers": "not slow"}, runner)

    ctx = task.notify(Path("tests/unit/test_x.py"), {})

    assert calls == [["-m", "not slow", "tests/unit"]]
    assert ctx == {"test_exit_code": 1}


def test_sass_without_libsass_is_unusable(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setitem(sys.modules, "sass", None)
    factories = FactoryRegistry("task")
    resolver = build_task_resolver(factories)
    resolver.install(relay_builtin.tasks)
    project = ProjectContext(paths=(tmp_path,), target=tmp_path / "target")
    registry = TaskRegistry(resolver, lambda: project)

    with caplog.at_level(logging.ERROR):
        assert registry.require("relay_builtin.tasks/sass") is None
    assert "cannot initialize task relay_builtin.tasks/sass" in caplog.text
    assert registry.require("relay_builtin.tasks/clean") is not None


def test_sass_compiles_changed_resource(tmp_path: Path) -> None:
    styles = tmp_path / "styles"
    styles.mkdir()
    (styles / "main.scss").write_text("a { b { color: red; } }")
    (styles / "other.scss").write_text("p { color: blue; }")
    compiled: list[str] = []
    compiler = SimpleNamespace(
        compile=lambda filename, **kwargs: compiled.append(Path(filename).name) or "css"
    )
    task = relay_builtin.tasks.sass.SassTask({"source_path": "styles"}, (tmp_path,), tmp_path / "target", compiler)

    ctx = task.notify(styles / "main.scss", {})

    assert compiled == ["main.scss"]
    assert ctx["sass"] == [str(tmp_path / "target" / "assets" / "main.css")]


def _builtin_registry(tmp_path: Path, src: Path, target: Path) -> TaskRegistry:
    factories = FactoryRegistry("task")
    resolver = build_task_resolver(factories)
    resolver.install(relay_builtin.tasks)
    project = ProjectContext(paths=(src,), target=target)
    return TaskRegistry(resolver, lambda: project)


def test_aot_extra_modules_from_task_string(tmp_path: Path) -> None:
    src, target = _project(tmp_path)
    registry = _builtin_registry(tmp_path, src, target)

    ctx = run_from_spec(registry, "aot:extra_modules=json")

    assert "json" in ctx["aot_modules"]
    assert (target / "classes" / "json" / "__init__.pyc").is_file()
    assert not any(len(module) == 1 for module in ctx["aot_modules"])


def test_docs_modules_from_task_string(tmp_path: Path) -> None:
    src, target = _project(tmp_path)
    registry = _builtin_registry(tmp_path, src, target)

    ctx = run_from_spec(registry, "docs:modules=demo")

    assert ctx["docs"] == [str(target / "docs" / "demo.html")]


def test_package_options_from_task_string(tmp_path: Path) -> None:
    src, target = _project(tmp_path)
    (src / "build").mkdir()
    (src / "build" / "stale.py").write_text("")
    registry = _builtin_registry(tmp_path, src, target)

    ctx = run_from_spec(
        registry,
        "info:name=demo:version=2.0,"
        "package:main=demo.core.answer:exclude_paths=build:compressed=false",
    )

    archive = Path(ctx["package"])
    assert archive.name == "demo-2.0.pyz"
    with zipfile.ZipFile(archive) as bundle:
        names = bundle.namelist()
        entry = bundle.read("__main__.py").decode("utf-8")
        stored = {member.compress_type for member in bundle.infolist() if not member.is_dir()}
    assert "demo/core.py" in names
    assert not any(name.startswith("build/") for name in names)
    assert "demo.core.answer()" in entry
    assert stored == {zipfile.ZIP_STORED}


def test_package_main_entry_forms() -> None:
    assert package.main_entry("pkg.module:run") == "pkg.module:run"
    assert package.main_entry("pkg.module.run") == "pkg.module:run"
    assert package.main_entry(None) is None
    with pytest.raises(ValueError):
        package.main_entry("run")


def test_option_coercion() -> None:
    assert as_list("json") == ["json"]
    assert as_list("a, b,,c") == ["a", "b", "c"]
    assert as_list(["x", "y"]) == ["x", "y"]
    assert as_list(None) == []
    assert as_bool("false") is False
    assert as_bool("Yes") is True
    assert as_bool(None, default=True) is True
    with pytest.raises(ValueError):
        as_bool("maybe")
