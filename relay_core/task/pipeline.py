"""Task composition and string-encoded task pipelines."""

from __future__ import annotations

import logging
from typing import Any, Callable

from relay_core.context import ContextMap
from relay_core.registry import qualify

from .registry import TASK_NAMESPACE, TaskRegistry

logger = logging.getLogger(__name__)

TASK_SEPARATOR = ","
OPTION_SEPARATOR = ":"
VALUE_SEPARATOR = "="

TaskFn = Callable[..., Any]


def parse_task_spec(
    text: str | None,
    namespace: str = TASK_NAMESPACE,
) -> list[tuple[str, dict[str, Any]]]:
    """Decompose ``clean,info:env=test:version=1.2,aot`` into ``(task, options)`` tuples.

    Short task names are qualified with ``namespace``. Option values stay
    strings; an option given without ``=`` becomes a ``True`` flag.
    """

    tasks: list[tuple[str, dict[str, Any]]] = []
    for chunk in (text or "").split(TASK_SEPARATOR):
        name, *assignments = chunk.strip().split(OPTION_SEPARATOR)
        if not name.strip():
            continue
        options: dict[str, Any] = {}
        for assignment in assignments:
            key, sep, value = assignment.partition(VALUE_SEPARATOR)
            if not key.strip():
                continue
            options[key.strip()] = value.strip() if sep else True
        tasks.append((qualify(name, namespace), options))
    return tasks


def run_from_spec(
    registry: TaskRegistry,
    text: str | None,
    namespace: str = TASK_NAMESPACE,
) -> ContextMap:
    """Run tasks listed in ``text`` one after another and return the final context.

    Each task receives its options as input along with the context returned
    by its predecessor. Tasks that fail to resolve are skipped and leave the
    context untouched.
    """

    context = ContextMap()
    for identifier, options in parse_task_spec(text, namespace):
        handle = registry.require(identifier)
        if handle is None:
            logger.warning("skipping task %s", identifier)
            continue
        logger.info("running task %s", identifier)
        result = handle(options, context)
        if result is not None:
            context = result
    return context


def chain(*tasks: TaskFn) -> TaskFn:
    """Compose tasks left to right; each one gets its predecessor's context."""

    def composed(*args: Any) -> Any:
        if not tasks:
            return args[0] if args else None
        first, *rest = tasks
        result = first(*args)
        for task in rest:
            result = task(result)
        return result

    return composed


def compose(*tasks: TaskFn) -> TaskFn:
    """Compose tasks right to left, like mathematical function composition."""

    return chain(*reversed(tasks))
