"""Target directory cleaner."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Mapping, Sequence

from relay_core.task import Task

logger = logging.getLogger(__name__)


def invoke(
    ctx: Mapping[str, Any],
    options: Mapping[str, Any],
    classpaths: Sequence[Path],
    target: Path,
) -> dict[str, Any]:
    target = Path(target).resolve()
    for path in classpaths:
        if Path(path).resolve().is_relative_to(target):
            raise ValueError(f"refusing to clean {target}: it contains source root {path}")

    if target.exists():
        logger.info("cleaning %s", target)
        shutil.rmtree(target)
    target.mkdir(parents=True, exist_ok=True)
    return {**ctx, "cleaned": True}


class CleanTask(Task):
    def __init__(self, options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> None:
        self.options = dict(options)
        self.classpaths = classpaths
        self.target = target

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.classpaths, self.target)

    def describe(self) -> str:
        return """Target directory cleaner.

Removes the target directory and everything built into it.
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> CleanTask:
    return CleanTask(options, classpaths, target)
