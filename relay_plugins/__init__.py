"""Built-in relay plugins."""

from __future__ import annotations

from importlib import import_module
from typing import Any, Callable

from relay_core.registry import FactoryRegistry

NAMESPACE = __name__

_BUILTIN_PLUGINS = ("server", "repl", "watch")


def _from_module(module_name: str) -> Callable[[Any], Any]:
    def factory(config: Any) -> Any:
        return import_module(module_name).init_plugin(config)

    return factory


def register_plugins(registry: FactoryRegistry) -> None:
    """Register the built-in plugin factories with the supplied registry."""

    for name in _BUILTIN_PLUGINS:
        registry.register(
            f"{NAMESPACE}/{name}",
            _from_module(f"{NAMESPACE}.{name}"),
            origin="builtin",
        )
