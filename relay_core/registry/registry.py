"""In-memory registry mapping identifiers to factories."""

from __future__ import annotations

import threading
from typing import Any, Callable

from relay_core.errors import InvalidIdentifier

from .entry import FactoryEntry
from .errors import FactoryCollisionError, FactoryNotFoundError
from .identifier import Identifier


class FactoryRegistry:
    """A registry that tracks factories by qualified identifier."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._entries: dict[Identifier, FactoryEntry] = {}
        self._lock = threading.RLock()

    def register(
        self,
        identifier: str | Identifier,
        factory: Callable[..., Any],
        *,
        origin: str = "builtin",
    ) -> FactoryEntry:
        """Register a factory, raising on identifier collisions."""

        entry = FactoryEntry(
            identifier=Identifier.parse(identifier),
            factory=factory,
            origin=origin,
        )
        with self._lock:
            if entry.identifier in self._entries:
                raise FactoryCollisionError(
                    f"{self.kind} {entry.qualified_name} is already registered."
                )
            self._entries[entry.identifier] = entry
        return entry

    def get(self, identifier: str | Identifier) -> FactoryEntry | None:
        with self._lock:
            return self._entries.get(Identifier.parse(identifier))

    def resolve(self, identifier: str | Identifier) -> FactoryEntry:
        """Return the entry for ``identifier`` or raise ``FactoryNotFoundError``."""

        entry = self.get(identifier)
        if entry is None:
            raise FactoryNotFoundError(f"{self.kind} {identifier} is not registered.")
        return entry

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, (str, Identifier)):
            return False
        try:
            return self.get(identifier) is not None
        except InvalidIdentifier:
            return False

    def names(self) -> tuple[str, ...]:
        """List registered identifiers in qualified order."""

        with self._lock:
            return tuple(sorted(entry.qualified_name for entry in self._entries.values()))
