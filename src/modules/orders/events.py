"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is taken in."""

    status: str = ""
    actor: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every department stage step and manual correction."""

    old_status: str = ""
    new_status: str = ""
    actor: str = ""


@dataclass(frozen=True)
class OrderCompleted(DomainEvent):
    actor: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    old_status: str = ""
    actor: str = ""


@dataclass(frozen=True)
class OrderReturned(DomainEvent):
    old_status: str = ""
    return_date: str = ""
    actor: str = ""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    actor: str = ""
