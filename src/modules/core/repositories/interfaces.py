"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on a concrete store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Order``).  Entities are addressed by a string id.
    """

    @abstractmethod
    def find(self, id: str) -> Optional[T]:
        """Retrieve an entity by id, or ``None``."""

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Append a new entity."""

    @abstractmethod
    def replace(self, entity: T) -> bool:
        """Overwrite the stored entity with the same id.

        Returns ``False`` when nothing is stored under that id.
        """

    @abstractmethod
    def remove(self, id: str) -> bool:
        """Remove an entity by id.  Returns ``False`` if it was absent."""

    @abstractmethod
    def list_all(self) -> List[T]:
        """Return every stored entity in insertion order."""
