"""Generic repository interface (Dependency Inversion Principle).

``IRepository[T]`` is the base contract every module repository extends.
Services depend on these abstractions, never on the ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base repository contract for an entity ``T``."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve a live entity by primary key, ``None`` if missing."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List live entities with optional ORM look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete an entity; ``False`` when it does not exist."""
