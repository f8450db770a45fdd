"""TCP socket REPL server, bound to the session context."""

from __future__ import annotations

import code
import contextlib
import logging
import socketserver
import threading
from typing import Any, Mapping

from relay_core.context import PluginContext
from relay_core.plugin import Plugin
from relay_core.registry import qualify
from relay_core.task import TASK_NAMESPACE

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5555


class _SocketConsole(code.InteractiveConsole):
    def __init__(self, handler: socketserver.StreamRequestHandler, namespace: dict[str, Any]) -> None:
        super().__init__(locals=namespace)
        self.handler = handler

    def write(self, data: str) -> None:
        self.handler.wfile.write(data.encode("utf-8"))
        self.handler.wfile.flush()

    def flush(self) -> None:
        self.handler.wfile.flush()

    def runcode(self, code_obj: Any) -> None:
        with contextlib.redirect_stdout(self):
            super().runcode(code_obj)

    def raw_input(self, prompt: str = "") -> str:
        self.write(prompt)
        line = self.handler.rfile.readline()
        if not line:
            raise EOFError
        return line.decode("utf-8").rstrip("\r\n")


class _ReplHandler(socketserver.StreamRequestHandler):
    server: "_ReplServer"

    def handle(self) -> None:
        console = _SocketConsole(self, self.server.namespace_factory())
        try:
            console.interact(banner="relay socket REPL", exitmsg="")
        except (EOFError, ConnectionError, SystemExit):
            pass


class _ReplServer(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True


def session_namespace(ctx: PluginContext) -> dict[str, Any]:
    """Names available in every REPL session."""

    return {
        "ctx": ctx,
        "task": lambda name: ctx.require_task(qualify(name, TASK_NAMESPACE)),
    }


class ServerPlugin(Plugin):
    """Accepts REPL connections on a TCP port for the session lifetime."""

    def __init__(self, config: Mapping[str, Any] | None) -> None:
        config = config or {}
        self.host = str(config.get("host", DEFAULT_HOST))
        self.port = int(config.get("port", DEFAULT_PORT))

    def activate(self, ctx: PluginContext) -> _ReplServer:
        server = _ReplServer((self.host, self.port), _ReplHandler)
        server.namespace_factory = lambda: session_namespace(ctx)
        thread = threading.Thread(target=server.serve_forever, name="relay-repl-server", daemon=True)
        thread.start()
        host, port = server.server_address[:2]
        logger.info("socket REPL listening on %s:%s", host, port)
        return server

    def deactivate(self, result: Any) -> None:
        if result is None:
            return
        logger.debug("stopping socket REPL")
        result.shutdown()
        result.server_close()


def init_plugin(config: Mapping[str, Any] | None) -> ServerPlugin:
    return ServerPlugin(config)
