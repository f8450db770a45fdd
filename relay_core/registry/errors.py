"""Custom errors raised by the factory registry."""

from __future__ import annotations


class FactoryRegistryError(Exception):
    """Base class for factory registry errors."""


class FactoryCollisionError(FactoryRegistryError):
    """Raised when a factory already exists for an identifier."""


class FactoryNotFoundError(FactoryRegistryError):
    """Raised when no factory is registered for an identifier."""
