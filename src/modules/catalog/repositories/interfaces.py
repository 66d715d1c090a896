"""Catalog product repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.catalog.models import CatalogProduct


class ICatalogProductRepository(IRepository["CatalogProduct"]):
    """Repository contract for catalog products."""

    @abstractmethod
    def in_bulk(self, ids: Iterable[str]) -> Dict[str, CatalogProduct]:
        """Live products keyed by ``str(id)``; unknown ids are skipped."""
