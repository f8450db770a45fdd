"""Command line surface of the relay build orchestrator."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Sequence

from relay_core import EXIT_SUCCESS, RelayApp, load_config

logger = logging.getLogger("relay_cli")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relay",
        description="relay: load plugins and run build task pipelines.",
    )
    parser.add_argument("--version", action="version", version="relay v0.1.0")
    parser.add_argument(
        "-c",
        "--config",
        help="TOML file with relay configuration (default: $RELAY_CONFIG or relay.toml)",
    )
    parser.add_argument(
        "-d",
        "--target",
        default="target",
        help="target directory where to build artifacts",
    )
    parser.add_argument(
        "-p",
        "--plugins",
        default="",
        help="comma-separated list of plugins to activate, eg. watch,server",
    )
    parser.add_argument(
        "-t",
        "--tasks",
        help="comma-separated list of tasks to run, eg. clean,info:version=1.2,aot",
    )
    parser.add_argument(
        "-s",
        "--source",
        action="append",
        default=None,
        help="project source root (repeatable, default: current directory)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity",
    )
    return parser


def split_list(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def main(
    argv: Sequence[str] | None = None,
    *,
    halt: Callable[[int], Any] | None = None,
    install_hooks: bool = True,
) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    config = load_config(args.config)
    if config is None:
        logger.error("Configuration not found.")
        return EXIT_SUCCESS

    app = RelayApp(config, target=args.target, sources=args.source, halt=halt)
    app.start(split_list(args.plugins), install_hooks=install_hooks)

    if args.tasks:
        context = app.run_tasks(args.tasks)
        logger.info("pipeline finished with context keys: %s", ", ".join(sorted(context)) or "none")

    if app.plugin_manager.active and not app.terminated:
        logger.info("session running, waiting for termination")
        app.wait()
    app.terminate()
    return EXIT_SUCCESS
