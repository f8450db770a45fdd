"""Interactive console plugin."""

from __future__ import annotations

import code
import logging
import threading
from typing import Any, Callable, Mapping

from relay_core.context import DESCRIBE, PluginContext
from relay_core.plugin import Plugin

from .server import session_namespace

logger = logging.getLogger(__name__)

BANNER = """relay console

  clean = task("clean")  resolve a task
  clean(DESCRIBE)        describe it
  clean({"x": 1})        run it with input
"""


class ReplPlugin(Plugin):
    """Runs an interactive console and ends the session when it is closed."""

    def __init__(
        self,
        config: Mapping[str, Any] | None,
        interact: Callable[..., Any] = code.interact,
    ) -> None:
        self.config = config or {}
        self.interact = interact

    def activate(self, ctx: PluginContext) -> threading.Thread:
        namespace = session_namespace(ctx)
        namespace["DESCRIBE"] = DESCRIBE
        thread = threading.Thread(
            target=self._run,
            args=(ctx, namespace),
            name="relay-console",
        )
        thread.start()
        return thread

    def _run(self, ctx: PluginContext, namespace: dict[str, Any]) -> None:
        try:
            self.interact(banner=self.config.get("banner", BANNER), local=namespace, exitmsg="")
        except SystemExit:
            logger.debug("console closed with exit()")
        finally:
            ctx.terminate()


def init_plugin(config: Mapping[str, Any] | None) -> ReplPlugin:
    return ReplPlugin(config)
