"""Catalog service layer (Use Cases).

Writes are reserved to Super Admin; every profile may read. Deleting a
product does not check for orders referencing it, since orders carry
their own name snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.catalog.exceptions import CatalogWriteNotAllowed, ProductNotFound
from modules.catalog.models import CatalogProduct

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
    from modules.catalog.repositories.interfaces import ICatalogProductRepository

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for catalog use-cases.

    Receives an ``ICatalogProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICatalogProductRepository) -> None:
        self._repo = repository

    @staticmethod
    def _require_superadmin(actor: ActorDTO) -> None:
        if not actor.is_superadmin:
            logger.warning("catalog.write_forbidden", role=actor.role)
            raise CatalogWriteNotAllowed("Only Super Admin may change the catalog.")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO, actor: ActorDTO) -> CatalogProduct:
        self._require_superadmin(actor)
        product = CatalogProduct(
            name=dto.name,
            category=dto.category,
            image=dto.image,
            description=dto.description,
        )
        product = self._repo.save(product)
        logger.info("catalog.created", product_id=str(product.id), actor=actor.display_name)
        return product

    @transaction.atomic
    def update_product(
        self, id: str, dto: UpdateProductDTO, actor: ActorDTO
    ) -> CatalogProduct:
        """Apply the supplied fields to an existing product.

        Raises:
            CatalogWriteNotAllowed: the actor is not Super Admin.
            ProductNotFound: if the product does not exist.
        """
        self._require_superadmin(actor)
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        for field in ("name", "category", "image", "description"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("catalog.updated", product_id=str(id), actor=actor.display_name)
        return product

    @transaction.atomic
    def delete_product(self, id: str, actor: ActorDTO) -> None:
        self._require_superadmin(actor)
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("catalog.deleted", product_id=str(id), actor=actor.display_name)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[CatalogProduct]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> CatalogProduct:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
