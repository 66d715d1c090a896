"""Catalog domain exceptions."""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class CatalogWriteNotAllowed(Exception):
    """Only Super Admin may change the catalog."""
