"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist or has been soft-deleted."""


class InvalidOrderStatus(Exception):
    """The action does not apply to the order's current status."""


class ActionNotAllowed(Exception):
    """The actor's role may not perform this action."""


class ReturnDateRequired(Exception):
    """A return was requested without a return date."""


class ProductNotFound(Exception):
    """The catalog product referenced by the order does not exist."""
