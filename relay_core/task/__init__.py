"""Task abstractions, resolution and pipelines."""

from .base import Task
from .handle import TaskHandle
from .pipeline import chain, compose, parse_task_spec, run_from_spec
from .registry import TASK_NAMESPACE, TaskRegistry, build_task_resolver

__all__ = [
    "Task",
    "TaskHandle",
    "TaskRegistry",
    "TASK_NAMESPACE",
    "build_task_resolver",
    "chain",
    "compose",
    "parse_task_spec",
    "run_from_spec",
]
