"""Registry entry describing a factory bound to an identifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .identifier import Identifier


@dataclass(frozen=True)
class FactoryEntry:
    """Immutable descriptor for a registered factory."""

    identifier: Identifier
    factory: Callable[..., Any]
    origin: str

    def __post_init__(self) -> None:
        if not callable(self.factory):
            raise TypeError("factory must be callable.")
        if not self.origin:
            raise ValueError("origin cannot be empty.")

    @property
    def qualified_name(self) -> str:
        """Return the ``namespace/name`` identifier for this entry."""

        return str(self.identifier)
