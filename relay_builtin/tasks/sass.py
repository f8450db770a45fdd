"""CSS preprocessor backed by libsass."""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Iterator, Mapping, Sequence

from relay_core.task import Task

logger = logging.getLogger(__name__)

ASSETS_DIR = "assets"


def _resources(classpaths: Sequence[Path], source_path: str) -> Iterator[tuple[Path, Path]]:
    for root in classpaths:
        base = Path(root) / source_path
        if not base.is_dir():
            continue
        for resource in sorted(base.rglob("*.scss")):
            if resource.name.startswith("_"):
                continue
            yield resource, resource.relative_to(base)


def invoke(
    ctx: Mapping[str, Any],
    options: Mapping[str, Any],
    classpaths: Sequence[Path],
    target: Path,
    compiler: ModuleType,
) -> dict[str, Any]:
    output_dir = Path(target) / options.get("output_dir", ASSETS_DIR)
    sass_options = dict(options.get("sass_options", {}))
    changed = options.get("file")
    # changed partials trigger a full rebuild
    only = None if changed is None or Path(changed).name.startswith("_") else Path(changed).resolve()
    outputs: list[str] = []

    for resource, relative in _resources(classpaths, options.get("source_path", "")):
        if only is not None and resource.resolve() != only:
            continue
        destination = (output_dir / relative).with_suffix(".css")
        destination.parent.mkdir(parents=True, exist_ok=True)
        logger.info("SASS %s", relative)
        css = compiler.compile(filename=str(resource), **sass_options)
        destination.write_text(css)
        outputs.append(str(destination))

    return {**ctx, "sass": outputs}


class SassTask(Task):
    def __init__(
        self,
        options: Mapping[str, Any],
        classpaths: Sequence[Path],
        target: Path,
        compiler: ModuleType,
    ) -> None:
        self.options = dict(options)
        self.classpaths = classpaths
        self.target = target
        self.compiler = compiler

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        if isinstance(input, Mapping):
            options = {**self.options, **input}
        elif input is not None:
            options = {**self.options, "file": input}
        else:
            options = self.options
        return invoke(ctx, options, self.classpaths, self.target, self.compiler)

    def notify(self, path: Path, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        return self.invoke(path, ctx)

    def describe(self) -> str:
        return """CSS preprocessor.

Takes Sass/Scss files and turns them into CSS ones.

Options:
--------

  source_path - relative directory with sass/scss files to transform
  output_dir - directory where to store generated CSS files
  sass_options - sass compiler options
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> SassTask:
    import sass

    return SassTask(options, classpaths, target, sass)
