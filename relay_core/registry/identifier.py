"""Namespace-qualified identifiers used to locate plugins and tasks."""

from __future__ import annotations

from dataclasses import dataclass

from relay_core.errors import InvalidIdentifier

SEPARATOR = "/"


@dataclass(frozen=True)
class Identifier:
    """Immutable ``namespace/name`` pair.

    The namespace is an importable module path, the name selects a factory
    registered for (or by) that module.
    """

    namespace: str
    name: str

    @classmethod
    def parse(cls, text: "str | Identifier") -> "Identifier":
        """Parse ``namespace/name``, raising ``InvalidIdentifier`` otherwise."""

        if isinstance(text, Identifier):
            return text
        namespace, sep, name = str(text).strip().rpartition(SEPARATOR)
        if not sep or not namespace or not name:
            raise InvalidIdentifier(str(text))
        return cls(namespace=namespace, name=name)

    def __str__(self) -> str:
        return f"{self.namespace}{SEPARATOR}{self.name}"


def qualify(text: str, namespace: str) -> str:
    """Prefix a short name with ``namespace`` unless it is already qualified."""

    text = text.strip()
    if SEPARATOR in text:
        return text
    return f"{namespace}{SEPARATOR}{text}"
