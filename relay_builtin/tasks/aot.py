"""Ahead-of-time byte compilation of project sources."""

from __future__ import annotations

import importlib.util
import logging
import py_compile
import time
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from relay_core.task import Task

from .options import as_list

logger = logging.getLogger(__name__)

CLASSES_DIR = "classes"
SKIPPED_PREFIXES = ("relay_",)


def _iter_sources(root: Path, target: Path) -> Iterator[Path]:
    for path in sorted(root.rglob("*.py")):
        if path.is_relative_to(target):
            continue
        if any(part.startswith(".") or part == "__pycache__" for part in path.relative_to(root).parts):
            continue
        yield path


def _module_name(relative: Path) -> str:
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _compile(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    py_compile.compile(str(source), cfile=str(destination), doraise=True)


def invoke(
    ctx: Mapping[str, Any],
    options: Mapping[str, Any],
    classpaths: Sequence[Path],
    target: Path,
) -> dict[str, Any]:
    target = Path(target).resolve()
    classes = target / CLASSES_DIR
    classes.mkdir(parents=True, exist_ok=True)
    started = time.perf_counter()
    compiled: list[str] = []

    for root in classpaths:
        root = Path(root).resolve()
        if not root.is_dir():
            continue
        for source in _iter_sources(root, target):
            relative = source.relative_to(root)
            module = _module_name(relative)
            if module.startswith(SKIPPED_PREFIXES):
                continue
            logger.info("compiling %s", module)
            _compile(source, (classes / relative).with_suffix(".pyc"))
            compiled.append(module)

    for module in as_list(options.get("extra_modules")):
        spec = importlib.util.find_spec(module)
        if spec is None or not spec.origin or not spec.origin.endswith(".py"):
            logger.warning("cannot locate sources of %s", module)
            continue
        logger.info("compiling %s", module)
        relative = Path(*module.split("."))
        if Path(spec.origin).name == "__init__.py":
            relative = relative / "__init__"
        _compile(Path(spec.origin), classes / relative.with_suffix(".pyc"))
        compiled.append(module)

    logger.info("AOT finished in %.2fs", time.perf_counter() - started)
    return {**ctx, "aot": True, "aot_modules": compiled}


class AotTask(Task):
    def __init__(self, options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> None:
        self.options = dict(options)
        self.classpaths = classpaths
        self.target = target

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.classpaths, self.target)

    def describe(self) -> str:
        return """Ahead-Of-Time compilation.

Byte-compiles every module found in the project source roots into
<target>/classes.

Options:
--------

  extra_modules - collection of additional importable modules to compile
                  (comma separated when given as a string).
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> AotTask:
    return AotTask(options, classpaths, target)
