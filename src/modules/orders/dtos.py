"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order intake.
- ``OrderFilterDTO``: the order-list / export filter set.
- ``DepartmentQueueDTO`` / ``DashboardDTO``: read models for the
  department task view and the manager dashboard.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import (
    DEFAULT_EXPEDITION,
    DEFAULT_SIZE,
    SIZES,
    Department,
    OrderStatus,
    OrderType,
)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order intake.

    Validates:
    - ``order_id`` and ``marketplace`` are not blank.
    - a product is given, either ``product_id`` or ``product_name``.
    - ``size`` is one of ``SIZES``; ``quantity`` is at least 1.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    order_id: str
    product_id: Optional[UUID] = None
    product_name: str = ""
    size: str = DEFAULT_SIZE
    quantity: int = 1
    back_name: str = ""
    back_number: str = ""
    marketplace: str
    expedition: str = DEFAULT_EXPEDITION
    tracking_number: str = ""
    order_date: date
    order_type: OrderType = OrderType.PRE_ORDER

    @field_validator("order_id", "marketplace")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("This field may not be blank.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("size")
    @classmethod
    def size_must_be_known(cls, v: str) -> str:
        v = v.upper()
        if v not in SIZES:
            raise ValueError(f"Size must be one of {', '.join(SIZES)}.")
        return v

    @model_validator(mode="after")
    def product_required(self):
        if self.product_id is None and not self.product_name:
            raise ValueError("Either product_id or product_name is required.")
        return self


class OrderFilterDTO(BaseModel):
    """Filters shared by the order list, exports and reports."""

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    marketplace: Optional[str] = None
    order_type: Optional[OrderType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    only_custom: bool = False
    urgent: bool = False
    search: Optional[str] = None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class DepartmentQueueDTO(BaseModel):
    """Orders waiting on, or being worked by, one department."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    department: Department
    pending_status: str
    in_progress_status: str
    orders: list
    counts: Dict[str, int] = {}


class StageGroupDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    statuses: List[str]
    count: int


class DashboardDTO(BaseModel):
    """Manager dashboard read model."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    today: date
    total: int
    completed: int
    in_production: int
    overdue_count: int
    overdue: list
    stage_groups: List[StageGroupDTO]
