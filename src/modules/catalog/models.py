"""Catalog product model.

Products are reference entries picked at order intake; orders keep a
snapshot of the name, so deleting a product never touches past orders.
Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class ProductCategory(models.TextChoices):
    JERSEY = "Jersey", "Jersey"
    KEMEJA = "Kemeja", "Kemeja"
    KAOS = "Kaos", "Kaos"
    JAKET = "Jaket", "Jaket"


class CatalogProduct(SoftDeleteModel):
    """A garment model in the catalog.

    ``image`` holds either an inline ``data:`` URI (uploaded from the panel)
    or an http(s) URL; it may be empty.
    """

    name = models.CharField(max_length=255)
    category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        default=ProductCategory.JERSEY,
    )
    image = models.TextField(blank=True, default="")
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "catalog_products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"], name="catalog_category_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        self.name = (self.name or "").strip()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "catalog.product_created",
                product_id=str(self.id),
                name=self.name,
                category=self.category,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
