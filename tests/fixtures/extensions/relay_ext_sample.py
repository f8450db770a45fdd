"""Extension module registering its own task and plugin factories."""

from __future__ import annotations

from typing import Any, Mapping

from relay_core.plugin import Plugin
from relay_core.task import Task

NAMESPACE = __name__


class LintTask(Task):
    def __init__(self, options: Mapping[str, Any]) -> None:
        self.options = dict(options)

    def invoke(self, input: Any, ctx: Mapping[str, Any]) -> Mapping[str, Any]:
        strict = (input or {}).get("strict", self.options.get("strict", False))
        return {**ctx, "linted": True, "strict": strict}

    def describe(self) -> str:
        return "Sample linter."


class BannerPlugin(Plugin):
    def __init__(self, config: Any) -> None:
        self.config = config or {}

    def activate(self, ctx) -> str:
        return self.config.get("banner", "hello")


def register_tasks(registry) -> None:
    registry.register(f"{NAMESPACE}/lint", lambda opts, cps, target: LintTask(opts), origin=NAMESPACE)


def init_plugin(config: Any) -> BannerPlugin:
    return BannerPlugin(config)
