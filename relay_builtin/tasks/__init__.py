"""Built-in relay tasks."""

from __future__ import annotations

from relay_core.registry import FactoryRegistry

from . import aot, clean, docs, info, package, sass, testing

NAMESPACE = __name__

_BUILTIN_TASKS = {
    "clean": clean.create,
    "info": info.create,
    "aot": aot.create,
    "sass": sass.create,
    "test": testing.create,
    "docs": docs.create,
    "package": package.create,
}


def register_tasks(registry: FactoryRegistry) -> None:
    """Register the built-in task factories with the supplied registry."""

    for name, factory in _BUILTIN_TASKS.items():
        registry.register(f"{NAMESPACE}/{name}", factory, origin="builtin")
