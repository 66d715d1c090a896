"""Django ORM implementation of the catalog product repository.

Error handling follows the Null Object pattern: methods return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.catalog.models import CatalogProduct
from modules.catalog.repositories.interfaces import ICatalogProductRepository

logger = structlog.get_logger(__name__)


class CatalogProductDjangoRepository(ICatalogProductRepository):
    """Concrete catalog repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[CatalogProduct]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return CatalogProduct.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[CatalogProduct]:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category": "Jersey"}
            {"name__icontains": "home kit"}
        """
        queryset = CatalogProduct.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def in_bulk(self, ids: Iterable[str]) -> Dict[str, CatalogProduct]:
        valid = []
        for value in ids:
            try:
                valid.append(UUID(str(value)))
            except ValueError:
                continue
        products = CatalogProduct.objects.alive().filter(id__in=valid)
        return {str(p.id): p for p in products}

    @transaction.atomic
    def save(self, entity: CatalogProduct) -> CatalogProduct:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("catalog.product_saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID.

        Returns ``True`` if the product was found and soft-deleted,
        ``False`` if no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("catalog.product_soft_deleted", product_id=str(id))
        return True
