"""Turn namespaced identifiers into loaded modules and factory-made instances."""

from __future__ import annotations

import importlib
import logging
import threading
from types import ModuleType
from typing import Any, Callable

from relay_core.errors import InvalidIdentifier, LoadError

from .entry import FactoryEntry
from .identifier import Identifier
from .registry import FactoryRegistry

Importer = Callable[[str], ModuleType]


class IdentifierResolver:
    """Resolve identifiers against a registry, loading extension modules on demand.

    Built-in factories are registered up front and resolve without touching
    the importer. For any other identifier the namespace part is imported;
    the module may then expose ``register_hook(registry)``, called once per
    namespace, or a conventional ``initializer`` used as the factory for
    identifiers that are still unregistered after the hook ran.
    """

    def __init__(
        self,
        registry: FactoryRegistry,
        *,
        register_hook: str,
        initializer: str,
        error_type: type[LoadError] = LoadError,
        importer: Importer | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry
        self.register_hook = register_hook
        self.initializer = initializer
        self.error_type = error_type
        self._importer = importer or importlib.import_module
        self._logger = logger or logging.getLogger(__name__)
        self._hooked: set[str] = set()
        self._lock = threading.RLock()

    def install(self, module: ModuleType) -> None:
        """Register factories exposed by an already imported module."""

        with self._lock:
            if module.__name__ in self._hooked:
                return
            self._hooked.add(module.__name__)
            getattr(module, self.register_hook)(self.registry)

    def load(self, identifier: Identifier) -> FactoryEntry:
        """Return the factory entry for ``identifier``, importing its namespace if needed."""

        entry = self.registry.get(identifier)
        if entry is not None:
            return entry

        with self._lock:
            module = self._import(identifier.namespace)
            if identifier.namespace not in self._hooked:
                self._hooked.add(identifier.namespace)
                hook = getattr(module, self.register_hook, None)
                if callable(hook):
                    try:
                        hook(self.registry)
                    except Exception as exc:
                        raise LoadError(
                            f"module {identifier.namespace} failed to register "
                            f"{self.registry.kind} factories: {exc}"
                        ) from exc

            entry = self.registry.get(identifier)
            if entry is not None:
                return entry

            initializer = getattr(module, self.initializer, None)
            if not callable(initializer):
                raise LoadError(
                    f"module {identifier.namespace} has no {self.registry.kind} "
                    f"factory for {identifier}"
                )
            return self.registry.register(
                identifier, initializer, origin=identifier.namespace
            )

    def _import(self, namespace: str) -> ModuleType:
        try:
            return self._importer(namespace)
        except Exception as exc:
            raise LoadError(f"unable to load module {namespace}: {exc}") from exc

    def create(self, text: str | Identifier, *args: Any) -> Any:
        """Build an instance, raising on any resolution failure."""

        identifier = Identifier.parse(text)
        entry = self.load(identifier)
        try:
            instance = entry.factory(*args)
        except Exception as exc:
            raise self.error_type(
                f"cannot initialize {self.registry.kind} {identifier}: {exc}"
            ) from exc
        if instance is None:
            raise self.error_type(
                f"cannot initialize {self.registry.kind} {identifier}: factory produced nothing"
            )
        return instance

    def resolve(self, text: str | Identifier, *args: Any) -> Any | None:
        """Build an instance, logging resolution failures and returning ``None``."""

        try:
            return self.create(text, *args)
        except InvalidIdentifier as exc:
            self._logger.error("%s", exc)
        except LoadError as exc:
            self._logger.error("%s", exc)
        return None
