"""Convenience exports for the factory registry helpers."""

from .entry import FactoryEntry
from .errors import (
    FactoryCollisionError,
    FactoryNotFoundError,
    FactoryRegistryError,
)
from .identifier import Identifier, qualify
from .registry import FactoryRegistry
from .resolver import IdentifierResolver

__all__ = [
    "FactoryEntry",
    "FactoryRegistry",
    "FactoryRegistryError",
    "FactoryCollisionError",
    "FactoryNotFoundError",
    "Identifier",
    "IdentifierResolver",
    "qualify",
]
