"""Calling adapter that every resolved task is wrapped in."""

from __future__ import annotations

from pathlib import PurePath
from typing import Any, Mapping

from relay_core.context import DESCRIBE, ContextMap, Keyword, as_context
from relay_core.errors import UnsupportedControlArgument

from .base import Task


class TaskHandle:
    """Callable wrapper around a ``Task`` taking ``(input, context)``.

    Both arguments are optional, which leaves three ways of calling a task:

    1. input only, like ``info({"version": "1.2"})``. No context was given
       so an empty one is created.

    2. input and context, either passed directly or because the task had its
       input bound with ``functools.partial`` and was composed with others;
       the context coming from the previous task arrives second.

    3. context only. A composed task with no bound input gets the previous
       task's result as its single argument.

    Cases 1 and 3 are told apart by type: a ``ContextMap`` first argument is
    a context, anything else is input.
    """

    def __init__(self, identifier: str, task: Task) -> None:
        self.identifier = identifier
        self.task = task

    def __call__(
        self,
        input: Any = None,
        context: Mapping[str, Any] | None = None,
    ) -> ContextMap | None:
        context_as_input = context is None and isinstance(input, ContextMap)
        if context is not None:
            ctx = as_context(context)
        elif context_as_input:
            ctx = input
        else:
            ctx = ContextMap()
        argument = None if context_as_input else input

        if isinstance(argument, Keyword):
            if argument == DESCRIBE:
                print(self.task.describe())
                return None
            raise UnsupportedControlArgument(
                f"keyword {argument} not recognized by task {self.identifier}"
            )

        if isinstance(argument, PurePath):
            result = self.task.notify(argument, ctx)
        else:
            result = self.task.invoke(argument, ctx)

        if result is None:
            return ctx
        return as_context(result)

    def __repr__(self) -> str:
        return f"<TaskHandle {self.identifier}>"
