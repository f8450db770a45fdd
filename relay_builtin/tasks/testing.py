"""Test runner backed by pytest."""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping, Sequence

from relay_core.task import Task

from .options import as_list

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: dict[str, Any] = {
    "paths": ["tests"],
    "args": [],
    "markers": None,
    "keyword": None,
}


def build_args(options: Mapping[str, Any]) -> list[str]:
    args = as_list(options.get("args"))
    if options.get("markers"):
        args += ["-m", str(options["markers"])]
    if options.get("keyword"):
        args += ["-k", str(options["keyword"])]
    return args + as_list(options.get("paths"))


def invoke(ctx: Mapping[str, Any], options: Mapping[str, Any], runner: ModuleType) -> dict[str, Any]:
    args = build_args(options)
    logger.info("running tests: %s", " ".join(args))
    exit_code = int(runner.main(args))
    if exit_code:
        logger.warning("tests finished with exit code %s", exit_code)
    return {**ctx, "test_exit_code": exit_code}


class TestTask(Task):
    __test__ = False

    def __init__(self, options: Mapping[str, Any], runner: ModuleType) -> None:
        self.options = {**DEFAULT_OPTIONS, **options}
        self.runner = runner

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.runner)

    def describe(self) -> str:
        return """Tests runner based on pytest (https://pytest.org).

Options:
--------

  paths - test files or directories to collect (defaults to ["tests"])
  args - extra command line arguments handed to pytest
  markers - marker expression used to select tests (-m)
  keyword - keyword expression used to select tests (-k)
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> TestTask:
    import pytest

    return TestTask(options, pytest)
