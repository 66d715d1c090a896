"""Catalog image helpers.

Only inline ``data:`` URIs are decoded; remote URLs are never fetched.
"""

from __future__ import annotations

import base64
import binascii
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

DATA_URI_PREFIX = "data:"


def is_data_uri(value: str) -> bool:
    return bool(value) and value.startswith(DATA_URI_PREFIX)


def is_remote_url(value: str) -> bool:
    return bool(value) and value.startswith(("http://", "https://"))


def decode_data_uri(value: str) -> Optional[bytes]:
    """Return the bytes of a base64 ``data:`` URI, ``None`` when unusable."""
    if not is_data_uri(value):
        return None
    header, sep, data = value.partition(",")
    if not sep or ";base64" not in header:
        return None
    try:
        return base64.b64decode(data, validate=True)
    except (ValueError, binascii.Error):
        logger.warning("catalog.image_undecodable", header=header[:40])
        return None


def resolve_image(product) -> Optional[bytes]:
    """Image bytes of a catalog product, or ``None``."""
    if product is None:
        return None
    return decode_data_uri(product.image or "")
