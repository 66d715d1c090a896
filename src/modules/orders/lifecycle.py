"""Pure production lifecycle rules.

No I/O here: every function takes plain values and either returns the
outcome or raises a domain exception. ``OrderService`` wraps these with
locking, persistence and history.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from modules.accounts.constants import MANAGER_ROLES, UserRole
from modules.orders.constants import (
    DEPARTMENT_STAGES,
    ROLE_DEPARTMENTS,
    TERMINAL_STATES,
    Department,
    LifecycleAction,
    OrderStatus,
    OrderType,
)
from modules.orders.exceptions import ActionNotAllowed, InvalidOrderStatus

_STATUS_ORDER: tuple[str, ...] = tuple(OrderStatus.values)


def initial_status(order_type: str) -> OrderStatus:
    if order_type == OrderType.STOCK:
        return OrderStatus.PENDING_PACKING
    return OrderStatus.PENDING_SETTING


def queue_statuses(department: str) -> tuple[str, str]:
    stage = DEPARTMENT_STAGES[Department(department)]
    return stage.pending, stage.in_progress


def department_for_status(status: str) -> Optional[Department]:
    for department, stage in DEPARTMENT_STAGES.items():
        if status in (stage.pending, stage.in_progress):
            return Department(department)
    return None


def department_for_role(role: str) -> Optional[Department]:
    department = ROLE_DEPARTMENTS.get(role)
    return Department(department) if department else None


def can_act_for(role: str, department: str) -> bool:
    if role == UserRole.SUPERADMIN:
        return True
    return department_for_role(role) == department


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def plan_transition(
    status: str,
    action: str,
    role: str,
    department: Optional[str] = None,
    target: Optional[str] = None,
) -> OrderStatus:
    """Return the status ``action`` moves an order to.

    Raises:
        InvalidOrderStatus: terminal status, wrong stage, or bad target.
        ActionNotAllowed: the role may not perform the action.
    """
    action = LifecycleAction(action)
    if is_terminal(status):
        raise InvalidOrderStatus(
            f"Order is {status}; no further changes are allowed."
        )

    if action in (LifecycleAction.START, LifecycleAction.COMPLETE):
        return _plan_stage_step(status, action, role, department)

    if role not in MANAGER_ROLES:
        raise ActionNotAllowed(f"Role {role} may not {action.label.lower()} orders.")

    if action == LifecycleAction.CONFIRM:
        if status != OrderStatus.READY_TO_SHIP:
            raise InvalidOrderStatus(
                f"Only {OrderStatus.READY_TO_SHIP} orders can be confirmed, got {status}."
            )
        return OrderStatus.COMPLETED
    if action == LifecycleAction.CANCEL:
        return OrderStatus.CANCELED
    if action == LifecycleAction.RETURN:
        return OrderStatus.RETURNED

    # OVERRIDE
    if target is None or target not in OrderStatus.values:
        raise InvalidOrderStatus(f"Unknown target status {target!r}.")
    if is_terminal(target):
        raise InvalidOrderStatus(
            f"Use the dedicated action to move an order to {target}."
        )
    if target == status:
        raise InvalidOrderStatus(f"Order is already {status}.")
    return OrderStatus(target)


def _plan_stage_step(
    status: str, action: LifecycleAction, role: str, department: Optional[str]
) -> OrderStatus:
    owner = department_for_status(status)
    if owner is None:
        raise InvalidOrderStatus(f"No department works on {status} orders.")
    if department is not None and department != owner:
        raise InvalidOrderStatus(
            f"Order is in the {owner} stage, not {department}."
        )
    if not can_act_for(role, owner):
        raise ActionNotAllowed(f"Role {role} may not work on the {owner} queue.")

    stage = DEPARTMENT_STAGES[owner]
    if action == LifecycleAction.START:
        if status != stage.pending:
            raise InvalidOrderStatus(f"Order is already {status}.")
        new_status = stage.in_progress
    else:
        if status != stage.in_progress:
            raise InvalidOrderStatus(
                f"Start the {owner} stage before completing it."
            )
        new_status = stage.next

    return OrderStatus(new_status)


def is_overdue(order_date: date, status: str, today: date) -> bool:
    return order_date < today and not is_terminal(status)


def progress_percentage(status: str) -> int:
    index = _STATUS_ORDER.index(status)
    return round((index + 1) / len(_STATUS_ORDER) * 100)
