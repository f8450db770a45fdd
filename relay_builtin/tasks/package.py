"""Executable zip archive packager."""

from __future__ import annotations

import logging
import shutil
import zipapp
from pathlib import Path
from typing import Any, Mapping, Sequence

from relay_core.task import Task

from .options import as_bool, as_list

logger = logging.getLogger(__name__)

DIST_DIR = "dist"
STAGING_DIR = "package"
DEFAULT_INTERPRETER = "/usr/bin/env python3"
IGNORED = ("__pycache__", "*.pyc", ".*")


def archive_name(ctx: Mapping[str, Any], options: Mapping[str, Any]) -> str:
    if options.get("output_archive"):
        return str(options["output_archive"])
    name = ctx.get("name") or options.get("name") or "app"
    version = ctx.get("version") or options.get("version")
    return f"{DIST_DIR}/{name}-{version}.pyz" if version else f"{DIST_DIR}/{name}.pyz"


def main_entry(value: Any) -> str | None:
    """Accept ``pkg.module:fn`` or, from a task string, ``pkg.module.fn``."""

    if not value or value is True:
        return None
    value = str(value)
    if ":" in value:
        return value
    module, _, function = value.rpartition(".")
    if not module:
        raise ValueError(f"main must name a callable inside a module: {value!r}")
    return f"{module}:{function}"


def _stage(classpaths: Sequence[Path], staging: Path, target: Path, excluded: set[Path]) -> None:
    ignore_patterns = shutil.ignore_patterns(*IGNORED)

    def ignore(directory: str, names: list[str]) -> set[str]:
        skipped = set(ignore_patterns(directory, names))
        for name in names:
            path = (Path(directory) / name).resolve()
            if path == target or path in excluded:
                skipped.add(name)
        return skipped

    for root in classpaths:
        shutil.copytree(root, staging, ignore=ignore, dirs_exist_ok=True)


def invoke(
    ctx: Mapping[str, Any],
    options: Mapping[str, Any],
    classpaths: Sequence[Path],
    target: Path,
) -> dict[str, Any]:
    target = Path(target).resolve()
    staging = target / STAGING_DIR
    if staging.exists():
        shutil.rmtree(staging)
    staging.mkdir(parents=True)

    roots = [Path(root).resolve() for root in classpaths]
    excluded = {
        (root / path).resolve()
        for root in roots
        for path in as_list(options.get("exclude_paths"))
    }
    _stage(roots, staging, target, excluded)

    archive = target / archive_name(ctx, options)
    archive.parent.mkdir(parents=True, exist_ok=True)
    zipapp.create_archive(
        staging,
        target=archive,
        interpreter=options.get("interpreter", DEFAULT_INTERPRETER),
        main=main_entry(options.get("main")),
        compressed=as_bool(options.get("compressed"), default=True),
    )
    logger.info("packaged %s", archive)
    return {**ctx, "package": str(archive)}


class PackageTask(Task):
    def __init__(self, options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> None:
        self.options = dict(options)
        self.classpaths = classpaths
        self.target = target

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.classpaths, self.target)

    def describe(self) -> str:
        return """Zipapp packager.

Generates an executable archive (https://docs.python.org/3/library/zipapp.html)
of the project source roots.

Options:
--------

  output_archive - target related path of the archive, eg. dist/foo.pyz
  main - callable run by the archive, eg. "pkg.module:main"; in a task
         string write it as "pkg.module.main" since ":" separates options
  interpreter - shebang interpreter (defaults to "/usr/bin/env python3")
  exclude_paths - collection of source root related paths to leave out
                  (comma separated when given as a string)
  compressed - deflate archive members (defaults to true)

Name and version are taken from the context when the "info" task ran first.
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> PackageTask:
    return PackageTask(options, classpaths, target)
