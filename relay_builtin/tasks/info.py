"""Project info generator."""

from __future__ import annotations

import json
import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

from relay_core.task import Task

logger = logging.getLogger(__name__)

INFO_KEYS = ("name", "package", "version", "description")
INFO_FILE = "project-info.json"


def _git_sha(cwd: Path) -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


def invoke(ctx: Mapping[str, Any], options: Mapping[str, Any], target: Path) -> dict[str, Any]:
    info: dict[str, Any] = {key: options[key] for key in INFO_KEYS if key in options}
    info["build_time"] = datetime.now(timezone.utc).isoformat()
    sha = _git_sha(Path.cwd())
    if sha:
        info["git_sha"] = sha

    target = Path(target)
    target.mkdir(parents=True, exist_ok=True)
    (target / INFO_FILE).write_text(json.dumps(info, indent=2, sort_keys=True) + "\n")
    logger.debug("project info written to %s", target / INFO_FILE)
    return {**ctx, **info}


class InfoTask(Task):
    def __init__(self, options: Mapping[str, Any], target: Path) -> None:
        self.options = dict(options)
        self.target = target

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        options = {**self.options, **input} if isinstance(input, Mapping) else self.options
        return invoke(ctx, options, self.target)

    def describe(self) -> str:
        return """Project info generator.

Generates map of project-specific information used by other tasks.

Options:
--------

  name - project name, eg. "edge"
  package - top-level package of the project, eg. "edge.app"
  version - project version
  description - project description to be shown
"""


def create(options: Mapping[str, Any], classpaths: Sequence[Path], target: Path) -> InfoTask:
    return InfoTask(options, target)
