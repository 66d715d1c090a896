"""Catalog DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.catalog.images import is_data_uri, is_remote_url
from modules.catalog.models import ProductCategory


def _check_image(v: Optional[str]) -> Optional[str]:
    if v and not (is_data_uri(v) or is_remote_url(v)):
        raise ValueError("Image must be a data URI or an http(s) URL.")
    return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: ProductCategory = ProductCategory.JERSEY
    image: str = ""
    description: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("image")
    @classmethod
    def image_must_be_uri(cls, v: str) -> str:
        return _check_image(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    category: Optional[ProductCategory] = None
    image: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("image")
    @classmethod
    def image_must_be_uri(cls, v: Optional[str]) -> Optional[str]:
        return _check_image(v)
