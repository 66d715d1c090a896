"""Order domain constants.

Status choices, the department stage table and the transition map of the
production state machine. ``OrderStatus`` is declared in pipeline order;
``progress_percentage`` depends on it.
"""

from typing import NamedTuple

from django.db import models

from modules.accounts.constants import UserRole


class OrderStatus(models.TextChoices):
    PENDING_SETTING = "PENDING_SETTING", "Menunggu Setting"
    IN_SETTING = "IN_SETTING", "Proses Setting"
    PENDING_PRINT = "PENDING_PRINT", "Menunggu Print"
    IN_PRINT = "IN_PRINT", "Proses Print"
    PENDING_PRESS = "PENDING_PRESS", "Menunggu Press"
    IN_PRESS = "IN_PRESS", "Proses Press"
    PENDING_JAHIT = "PENDING_JAHIT", "Menunggu Jahit"
    IN_JAHIT = "IN_JAHIT", "Proses Jahit"
    PENDING_PACKING = "PENDING_PACKING", "Menunggu Packing"
    IN_PACKING = "IN_PACKING", "Proses Packing"
    READY_TO_SHIP = "READY_TO_SHIP", "Siap Dikirim"
    COMPLETED = "COMPLETED", "Selesai"
    CANCELED = "CANCELED", "Dibatalkan (Cancel)"
    RETURNED = "RETURNED", "Dikembalikan (Return)"


class OrderType(models.TextChoices):
    PRE_ORDER = "PRE_ORDER", "Produksi (PO)"
    STOCK = "STOCK", "Ambil Stok"


class Department(models.TextChoices):
    SETTING = "SETTING", "Setting"
    PRINT = "PRINT", "Print"
    PRESS = "PRESS", "Press"
    JAHIT = "JAHIT", "Jahit"
    PACKING = "PACKING", "Packing"


class StageTriple(NamedTuple):
    pending: str
    in_progress: str
    next: str


DEPARTMENT_STAGES: dict[str, StageTriple] = {
    Department.SETTING: StageTriple(
        OrderStatus.PENDING_SETTING, OrderStatus.IN_SETTING, OrderStatus.PENDING_PRINT
    ),
    Department.PRINT: StageTriple(
        OrderStatus.PENDING_PRINT, OrderStatus.IN_PRINT, OrderStatus.PENDING_PRESS
    ),
    Department.PRESS: StageTriple(
        OrderStatus.PENDING_PRESS, OrderStatus.IN_PRESS, OrderStatus.PENDING_JAHIT
    ),
    Department.JAHIT: StageTriple(
        OrderStatus.PENDING_JAHIT, OrderStatus.IN_JAHIT, OrderStatus.PENDING_PACKING
    ),
    Department.PACKING: StageTriple(
        OrderStatus.PENDING_PACKING, OrderStatus.IN_PACKING, OrderStatus.READY_TO_SHIP
    ),
}

ROLE_DEPARTMENTS: dict[str, str] = {
    UserRole.SETTING: Department.SETTING,
    UserRole.PRINT: Department.PRINT,
    UserRole.PRESS: Department.PRESS,
    UserRole.JAHIT: Department.JAHIT,
    UserRole.PACKING: Department.PACKING,
}

TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELED, OrderStatus.RETURNED}
)


def _build_transitions() -> dict[str, frozenset[str]]:
    transitions: dict[str, set[str]] = {status: set() for status in OrderStatus}
    for stage in DEPARTMENT_STAGES.values():
        transitions[stage.pending].add(stage.in_progress)
        transitions[stage.in_progress].add(stage.next)
    transitions[OrderStatus.READY_TO_SHIP].add(OrderStatus.COMPLETED)
    for status, targets in transitions.items():
        if status not in TERMINAL_STATES:
            targets.update({OrderStatus.CANCELED, OrderStatus.RETURNED})
    return {status: frozenset(targets) for status, targets in transitions.items()}


VALID_TRANSITIONS: dict[str, frozenset[str]] = _build_transitions()


class LifecycleAction(models.TextChoices):
    START = "START", "Mulai"
    COMPLETE = "COMPLETE", "Selesai Tahap"
    CONFIRM = "CONFIRM", "Konfirmasi Selesai"
    CANCEL = "CANCEL", "Batalkan"
    RETURN = "RETURN", "Retur"
    OVERRIDE = "OVERRIDE", "Ubah Status"


# Dashboard stage groups, in display order
STAGE_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Antrian Setting", (OrderStatus.PENDING_SETTING, OrderStatus.IN_SETTING)),
    (
        "Proses Print/Press",
        (
            OrderStatus.PENDING_PRINT,
            OrderStatus.IN_PRINT,
            OrderStatus.PENDING_PRESS,
            OrderStatus.IN_PRESS,
        ),
    ),
    ("Proses Jahit", (OrderStatus.PENDING_JAHIT, OrderStatus.IN_JAHIT)),
    (
        "Packing & Siap",
        (OrderStatus.PENDING_PACKING, OrderStatus.IN_PACKING, OrderStatus.READY_TO_SHIP),
    ),
)

MARKETPLACE_LIST: tuple[str, ...] = (
    "Shopee Erfo.id",
    "Shopee Safashion",
    "Shopee Benghar",
    "Tiktok Shop Erfo",
    "Tiktok Shop Safashion",
    "Lazada Erfo",
    "WhatsApp",
    "Offline",
)

EXPEDITIONS: tuple[str, ...] = (
    "J&T Express",
    "SPX",
    "JNE",
    "ANTERAJA",
    "SICEPAT",
    "LAINNYA / INPUT MANUAL",
)
DEFAULT_EXPEDITION = "J&T Express"

SIZES: tuple[str, ...] = ("XS", "S", "M", "L", "XL", "XXL", "3XL", "4XL", "5XL")
DEFAULT_SIZE = "L"

CUSTOM_PRODUCT_REF = "custom"
