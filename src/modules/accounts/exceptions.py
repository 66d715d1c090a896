"""Account domain exceptions."""

from __future__ import annotations


class ProfileNotFound(Exception):
    """The authenticated user has no profile (no role assigned)."""
