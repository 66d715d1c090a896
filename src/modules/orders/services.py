"""Order service layer (Use Cases).

Orchestrates order intake and the production lifecycle. Every command
takes the acting ``ActorDTO``; role checks run before any write, and each
write (status, history entry, outbox event) is one transaction.

Rules enforced:
- Stage steps follow ``DEPARTMENT_STAGES`` (pending -> in progress -> next).
- Terminal orders (completed, canceled, returned) never change again.
- Department roles act only on their own queue; managers close orders.
- A return always records the date the goods came back.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import UserRole
from modules.orders import lifecycle
from modules.orders.constants import (
    CUSTOM_PRODUCT_REF,
    DEPARTMENT_STAGES,
    STAGE_GROUPS,
    TERMINAL_STATES,
    Department,
    LifecycleAction,
    OrderStatus,
)
from modules.orders.dtos import DashboardDTO, DepartmentQueueDTO, StageGroupDTO
from modules.orders.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderDeleted,
    OrderReturned,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    ActionNotAllowed,
    InvalidOrderStatus,
    OrderNotFound,
    ProductNotFound,
    ReturnDateRequired,
)

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.accounts.services import WorkspaceService
    from modules.catalog.repositories.interfaces import ICatalogProductRepository
    from modules.orders.dtos import CreateOrderDTO, OrderFilterDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP). ``workspace`` is
    optional; when given, a successful intake clears the actor's draft.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: ICatalogProductRepository,
        workspace: Optional[WorkspaceService] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._workspace = workspace

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, actor: ActorDTO) -> Order:
        """Take in a new order.

        The initial status depends on the order type: stock orders skip
        straight to packing. A ``product_id`` snapshots the catalog entry.

        Raises:
            ActionNotAllowed: the actor is not a manager.
            ProductNotFound: ``product_id`` is not in the catalog.
        """
        log = logger.bind(order_id=dto.order_id, actor=actor.display_name)
        if not actor.is_manager:
            log.warning("order.create_forbidden", role=actor.role)
            raise ActionNotAllowed(f"Role {actor.role} may not create orders.")

        product_ref = CUSTOM_PRODUCT_REF
        product_name = dto.product_name
        if dto.product_id is not None:
            product = self._product_repo.get_by_id(str(dto.product_id))
            if not product:
                raise ProductNotFound(f"Product {dto.product_id} not found.")
            product_ref = str(product.id)
            product_name = product_name or product.name

        status = lifecycle.initial_status(dto.order_type)
        order = self._order_repo.create(
            {
                "order_id": dto.order_id,
                "product_ref": product_ref,
                "product_name": product_name,
                "size": dto.size,
                "quantity": dto.quantity,
                "back_name": dto.back_name,
                "back_number": dto.back_number,
                "marketplace": dto.marketplace,
                "expedition": dto.expedition,
                "tracking_number": dto.tracking_number,
                "order_date": dto.order_date,
                "order_type": dto.order_type,
                "status": status,
            }
        )
        self._order_repo.add_history(order, status, actor, notes="Order created")
        order.add_domain_event(
            OrderCreated(aggregate_id=order.id, status=status, actor=actor.display_name)
        )
        self._order_repo.save(order)

        if self._workspace is not None and actor.user_id is not None:
            user_id = actor.user_id
            transaction.on_commit(
                lambda: self._workspace.clear_draft(user_id), robust=True
            )

        log.info("order.created", id=str(order.id), status=status)
        return self._order_repo.get_by_id(str(order.id)) or order

    def start_stage(
        self, order_id: UUID, actor: ActorDTO, department: Optional[str] = None
    ) -> Order:
        """Move an order from the department's pending to its in-progress status."""
        return self._transition(
            order_id, actor, LifecycleAction.START, department=department
        )

    def complete_stage(
        self, order_id: UUID, actor: ActorDTO, department: Optional[str] = None
    ) -> Order:
        """Hand an in-progress order to the next department."""
        return self._transition(
            order_id, actor, LifecycleAction.COMPLETE, department=department
        )

    def confirm_completion(self, order_id: UUID, actor: ActorDTO) -> Order:
        return self._transition(order_id, actor, LifecycleAction.CONFIRM)

    def cancel_order(self, order_id: UUID, actor: ActorDTO, notes: str = "") -> Order:
        return self._transition(order_id, actor, LifecycleAction.CANCEL, notes=notes)

    def return_order(
        self,
        order_id: UUID,
        return_date: Optional[date],
        actor: ActorDTO,
        notes: str = "",
    ) -> Order:
        """Mark an order as returned on ``return_date``.

        Raises:
            ActionNotAllowed: the actor is not a manager.
            ReturnDateRequired: no date given; nothing is written.
        """
        return self._transition(
            order_id,
            actor,
            LifecycleAction.RETURN,
            notes=notes,
            return_date=return_date,
        )

    def override_status(
        self, order_id: UUID, new_status: str, actor: ActorDTO, notes: str = ""
    ) -> Order:
        """Manual correction of a non-terminal status by a manager."""
        return self._transition(
            order_id, actor, LifecycleAction.OVERRIDE, notes=notes, target=new_status
        )

    @transaction.atomic
    def delete_order(self, order_id: UUID, actor: ActorDTO) -> None:
        """Soft-delete an order (Super Admin only).

        Raises:
            ActionNotAllowed: the actor is not Super Admin.
            OrderNotFound: order does not exist.
        """
        if not actor.is_superadmin:
            raise ActionNotAllowed("Only Super Admin may delete orders.")
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        order.add_domain_event(
            OrderDeleted(aggregate_id=order.id, actor=actor.display_name)
        )
        self._order_repo.save(order)
        self._order_repo.delete(str(order_id))
        logger.info("order.deleted", order_id=str(order_id), actor=actor.display_name)

    @transaction.atomic
    def _transition(
        self,
        order_id: UUID,
        actor: ActorDTO,
        action: LifecycleAction,
        department: Optional[str] = None,
        target: Optional[str] = None,
        notes: str = "",
        return_date: Optional[date] = None,
    ) -> Order:
        """Lock, plan, write status + history + event, all or nothing.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the action does not apply to the status.
            ActionNotAllowed: the actor's role may not perform the action.
            ReturnDateRequired: a return without a date.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        log = logger.bind(
            order_id=str(order_id),
            action=action.value,
            current_status=old_status,
            actor=actor.display_name,
        )

        try:
            new_status = lifecycle.plan_transition(
                old_status, action, actor.role, department=department, target=target
            )
        except (InvalidOrderStatus, ActionNotAllowed) as exc:
            log.warning("order.invalid_transition", reason=str(exc))
            raise

        if action == LifecycleAction.RETURN and return_date is None:
            log.warning("order.return_date_missing")
            raise ReturnDateRequired("A return date is required.")

        order.status = new_status
        if action == LifecycleAction.RETURN:
            order.return_date = return_date

        self._order_repo.add_history(order, new_status, actor, notes=notes)
        order.add_domain_event(self._event_for(order, action, old_status, actor))
        self._order_repo.save(order)

        log.info("order.status_updated", new_status=new_status)
        return self._order_repo.get_by_id(str(order_id)) or order

    @staticmethod
    def _event_for(order: Order, action: LifecycleAction, old_status: str, actor: ActorDTO):
        name = actor.display_name
        if action == LifecycleAction.CONFIRM:
            return OrderCompleted(aggregate_id=order.id, actor=name)
        if action == LifecycleAction.CANCEL:
            return OrderCancelled(aggregate_id=order.id, old_status=old_status, actor=name)
        if action == LifecycleAction.RETURN:
            return OrderReturned(
                aggregate_id=order.id,
                old_status=old_status,
                return_date=order.return_date.isoformat(),
                actor=name,
            )
        return OrderStatusChanged(
            aggregate_id=order.id,
            old_status=old_status,
            new_status=order.status,
            actor=name,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[OrderFilterDTO] = None) -> List[Order]:
        """Filtered order list, newest ``order_date`` first."""
        return self._order_repo.search(filters)

    def department_queue(
        self, actor: ActorDTO, department: Optional[str] = None
    ) -> DepartmentQueueDTO:
        """Orders a department has to pick up or finish.

        Department roles always see their own queue. Super Admin may pick
        any department (``SETTING`` by default) and also gets the per
        department counts.

        Raises:
            ActionNotAllowed: the actor has no production queue.
        """
        own = lifecycle.department_for_role(actor.role)
        if own is not None:
            chosen = own
        elif actor.is_superadmin:
            chosen = Department(department) if department else Department.SETTING
        else:
            raise ActionNotAllowed(f"Role {actor.role} has no production queue.")

        pending, in_progress = lifecycle.queue_statuses(chosen)
        orders = self._order_repo.with_statuses([pending, in_progress])

        counts: Dict[str, int] = {}
        if actor.role == UserRole.SUPERADMIN:
            by_status = self._order_repo.count_by_status()
            counts = {
                dept: by_status.get(stage.pending, 0) + by_status.get(stage.in_progress, 0)
                for dept, stage in DEPARTMENT_STAGES.items()
            }

        return DepartmentQueueDTO(
            department=chosen,
            pending_status=pending,
            in_progress_status=in_progress,
            orders=orders,
            counts=counts,
        )

    def dashboard(self, actor: ActorDTO, today: Optional[date] = None) -> DashboardDTO:
        """Manager overview: totals, overdue orders and stage groups.

        Raises:
            ActionNotAllowed: the actor is not a manager.
        """
        if not actor.is_manager:
            raise ActionNotAllowed(f"Role {actor.role} may not view the dashboard.")
        today = today or timezone.localdate()
        orders = self._order_repo.list()

        by_status: Dict[str, int] = {}
        for order in orders:
            by_status[order.status] = by_status.get(order.status, 0) + 1

        overdue = sorted(
            (o for o in orders if lifecycle.is_overdue(o.order_date, o.status, today)),
            key=lambda o: (o.order_date, o.created_at),
        )
        groups = [
            StageGroupDTO(
                label=label,
                statuses=list(statuses),
                count=sum(by_status.get(s, 0) for s in statuses),
            )
            for label, statuses in STAGE_GROUPS
        ]
        return DashboardDTO(
            today=today,
            total=len(orders),
            completed=by_status.get(OrderStatus.COMPLETED, 0),
            in_production=sum(
                count for status, count in by_status.items() if status not in TERMINAL_STATES
            ),
            overdue_count=len(overdue),
            overdue=overdue,
            stage_groups=groups,
        )
