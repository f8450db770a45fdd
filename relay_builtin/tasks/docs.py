"""API documentation generator built on pydoc."""

from __future__ import annotations

import importlib
import logging
import pydoc
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from relay_core.task import Task

from .options import as_list

logger = logging.getLogger(__name__)

DOCS_DIR = "docs"


@contextmanager
def _insert_sys_path(paths: Sequence[Path]) -> Iterator[None]:
    added = [str(path) for path in paths if str(path) not in sys.path]
    sys.path[:0] = added
    try:
        yield
    finally:
        for path in added:
            if path in sys.path:
                sys.path.remove(path)


def discover_packages(classpaths: Sequence[Path]) -> list[str]:
    """Return top-level packages found directly under the source roots."""

    packages: list[str] = []
    for root in classpaths:
        for child in sorted(Path(root).iterdir()):
            if (child / "__init__.py").is_file() and child.name not in packages:
                packages.append(child.name)
    return packages


def invoke(
    ctx: Mapping[str, Any],
    options: Mapping[str, Any],
    classpaths: Sequence[Path],
    target: Path,
) -> dict[str, Any]:
    output = Path(target) / DOCS_DIR
    output.mkdir(parents=True, exist_ok=True)
    modules = as_list(options.get("modules")) or discover_packages(classpaths)
    written: list[str] = []

    with _insert_sys_path(classpaths):
        for name in modules:
            try:
                module = importlib.import_module(name)
            except Exception:
                logger.exception("cannot import %s, skipping", name)
                continue
            page = pydoc.html.page(pydoc.describe(module), pydoc.html.document(module, name))
            destination = output / f"{name}.html"
            destination.write_text(page, encoding="utf-8")
            written.append(str(destination))
            logger.info("documented %s", name)

    return {**ctx, "docs": written}


class DocsTask(Task):
    def __init__(self, options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> None:
        self.options = dict(options)
        self.classpaths = classpaths
        self.target = target

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.classpaths, self.target)

    def describe(self) -> str:
        return """API documentation generator.

Writes one HTML page per documented module into <target>/docs.

Options:
--------

  modules - collection of modules to document (by default all top-level packages)
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> DocsTask:
    return DocsTask(options, classpaths, target)
