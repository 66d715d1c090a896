"""Unit tests for the production lifecycle rules.

Covers:
- Initial status per order type.
- Department stage steps (start / complete) and role gating.
- Manager actions: confirm, cancel, return, override.
- Terminal states reject every action.
- Overdue classification and progress percentage.
- The transition map agrees with the stage table.
"""

from __future__ import annotations

from datetime import date

import pytest

from modules.accounts.constants import UserRole
from modules.orders import lifecycle
from modules.orders.constants import (
    DEPARTMENT_STAGES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    Department,
    LifecycleAction,
    OrderStatus,
    OrderType,
)
from modules.orders.exceptions import ActionNotAllowed, InvalidOrderStatus

pytestmark = pytest.mark.unit

DEPARTMENT_ROLES = [
    (UserRole.SETTING, Department.SETTING),
    (UserRole.PRINT, Department.PRINT),
    (UserRole.PRESS, Department.PRESS),
    (UserRole.JAHIT, Department.JAHIT),
    (UserRole.PACKING, Department.PACKING),
]


# ===========================================================================
# Lookup helpers
# ===========================================================================


class TestInitialStatus:
    def test_pre_order_starts_at_setting(self):
        assert lifecycle.initial_status(OrderType.PRE_ORDER) == OrderStatus.PENDING_SETTING

    def test_stock_order_skips_to_packing(self):
        assert lifecycle.initial_status(OrderType.STOCK) == OrderStatus.PENDING_PACKING


class TestDepartmentLookups:
    @pytest.mark.parametrize("role,department", DEPARTMENT_ROLES)
    def test_department_for_role(self, role, department):
        assert lifecycle.department_for_role(role) == department

    @pytest.mark.parametrize("role", [UserRole.SUPERADMIN, UserRole.ADMIN_MARKETPLACE])
    def test_managers_have_no_department(self, role):
        assert lifecycle.department_for_role(role) is None

    def test_queue_statuses(self):
        assert lifecycle.queue_statuses(Department.JAHIT) == (
            OrderStatus.PENDING_JAHIT,
            OrderStatus.IN_JAHIT,
        )

    @pytest.mark.parametrize(
        "status,department",
        [
            (OrderStatus.PENDING_SETTING, Department.SETTING),
            (OrderStatus.IN_PRINT, Department.PRINT),
            (OrderStatus.PENDING_PRESS, Department.PRESS),
            (OrderStatus.IN_PACKING, Department.PACKING),
        ],
    )
    def test_department_for_status(self, status, department):
        assert lifecycle.department_for_status(status) == department

    @pytest.mark.parametrize(
        "status", [OrderStatus.READY_TO_SHIP, OrderStatus.COMPLETED, OrderStatus.CANCELED]
    )
    def test_statuses_outside_the_pipeline_have_no_department(self, status):
        assert lifecycle.department_for_status(status) is None

    def test_superadmin_can_act_for_every_department(self):
        assert all(
            lifecycle.can_act_for(UserRole.SUPERADMIN, dept) for dept in Department.values
        )

    def test_admin_marketplace_cannot_act_for_departments(self):
        assert not any(
            lifecycle.can_act_for(UserRole.ADMIN_MARKETPLACE, dept)
            for dept in Department.values
        )

    def test_department_role_only_acts_for_own_department(self):
        assert lifecycle.can_act_for(UserRole.PRESS, Department.PRESS)
        assert not lifecycle.can_act_for(UserRole.PRESS, Department.PRINT)


# ===========================================================================
# Stage steps
# ===========================================================================


class TestStageSteps:
    @pytest.mark.parametrize("role,department", DEPARTMENT_ROLES)
    def test_start_moves_pending_to_in_progress(self, role, department):
        stage = DEPARTMENT_STAGES[department]
        new_status = lifecycle.plan_transition(
            stage.pending, LifecycleAction.START, role, department=department
        )
        assert new_status == stage.in_progress

    @pytest.mark.parametrize("role,department", DEPARTMENT_ROLES)
    def test_complete_hands_over_to_next_stage(self, role, department):
        stage = DEPARTMENT_STAGES[department]
        new_status = lifecycle.plan_transition(
            stage.in_progress, LifecycleAction.COMPLETE, role, department=department
        )
        assert new_status == stage.next

    def test_packing_complete_is_ready_to_ship(self):
        new_status = lifecycle.plan_transition(
            OrderStatus.IN_PACKING, LifecycleAction.COMPLETE, UserRole.PACKING
        )
        assert new_status == OrderStatus.READY_TO_SHIP

    def test_department_is_inferred_from_status(self):
        new_status = lifecycle.plan_transition(
            OrderStatus.PENDING_PRINT, LifecycleAction.START, UserRole.PRINT
        )
        assert new_status == OrderStatus.IN_PRINT

    def test_superadmin_may_step_any_department(self):
        new_status = lifecycle.plan_transition(
            OrderStatus.IN_JAHIT, LifecycleAction.COMPLETE, UserRole.SUPERADMIN
        )
        assert new_status == OrderStatus.PENDING_PACKING

    def test_other_department_is_not_allowed(self):
        with pytest.raises(ActionNotAllowed):
            lifecycle.plan_transition(
                OrderStatus.PENDING_PRINT, LifecycleAction.START, UserRole.SETTING
            )

    def test_admin_marketplace_cannot_step_stages(self):
        with pytest.raises(ActionNotAllowed):
            lifecycle.plan_transition(
                OrderStatus.PENDING_SETTING, LifecycleAction.START, UserRole.ADMIN_MARKETPLACE
            )

    def test_explicit_department_must_match_the_stage(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.PENDING_PRINT,
                LifecycleAction.START,
                UserRole.SUPERADMIN,
                department=Department.SETTING,
            )

    def test_start_twice_is_rejected(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.IN_SETTING, LifecycleAction.START, UserRole.SETTING
            )

    def test_complete_before_start_is_rejected(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.PENDING_SETTING, LifecycleAction.COMPLETE, UserRole.SETTING
            )

    def test_ready_to_ship_has_no_stage_step(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.READY_TO_SHIP, LifecycleAction.START, UserRole.SUPERADMIN
            )


# ===========================================================================
# Manager actions
# ===========================================================================


class TestManagerActions:
    @pytest.mark.parametrize("role", [UserRole.SUPERADMIN, UserRole.ADMIN_MARKETPLACE])
    def test_confirm_ready_to_ship(self, role):
        new_status = lifecycle.plan_transition(
            OrderStatus.READY_TO_SHIP, LifecycleAction.CONFIRM, role
        )
        assert new_status == OrderStatus.COMPLETED

    def test_confirm_requires_ready_to_ship(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.IN_PACKING, LifecycleAction.CONFIRM, UserRole.SUPERADMIN
            )

    def test_packing_cannot_confirm(self):
        with pytest.raises(ActionNotAllowed):
            lifecycle.plan_transition(
                OrderStatus.READY_TO_SHIP, LifecycleAction.CONFIRM, UserRole.PACKING
            )

    @pytest.mark.parametrize("status", [OrderStatus.PENDING_SETTING, OrderStatus.IN_PRESS])
    def test_cancel_from_any_active_status(self, status):
        assert (
            lifecycle.plan_transition(status, LifecycleAction.CANCEL, UserRole.ADMIN_MARKETPLACE)
            == OrderStatus.CANCELED
        )

    def test_return_from_ready_to_ship(self):
        assert (
            lifecycle.plan_transition(
                OrderStatus.READY_TO_SHIP, LifecycleAction.RETURN, UserRole.SUPERADMIN
            )
            == OrderStatus.RETURNED
        )

    def test_department_role_cannot_cancel(self):
        with pytest.raises(ActionNotAllowed):
            lifecycle.plan_transition(
                OrderStatus.PENDING_JAHIT, LifecycleAction.CANCEL, UserRole.JAHIT
            )

    def test_override_to_earlier_stage(self):
        new_status = lifecycle.plan_transition(
            OrderStatus.IN_JAHIT,
            LifecycleAction.OVERRIDE,
            UserRole.SUPERADMIN,
            target=OrderStatus.PENDING_PRINT,
        )
        assert new_status == OrderStatus.PENDING_PRINT

    @pytest.mark.parametrize("target", sorted(TERMINAL_STATES))
    def test_override_cannot_close_an_order(self, target):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.IN_JAHIT,
                LifecycleAction.OVERRIDE,
                UserRole.SUPERADMIN,
                target=target,
            )

    def test_override_to_same_status_is_rejected(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.IN_JAHIT,
                LifecycleAction.OVERRIDE,
                UserRole.SUPERADMIN,
                target=OrderStatus.IN_JAHIT,
            )

    def test_override_to_unknown_status_is_rejected(self):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                OrderStatus.IN_JAHIT,
                LifecycleAction.OVERRIDE,
                UserRole.SUPERADMIN,
                target="SHIPPED",
            )


# ===========================================================================
# Terminal lock
# ===========================================================================


class TestTerminalStates:
    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES))
    @pytest.mark.parametrize("action", LifecycleAction.values)
    def test_terminal_orders_reject_every_action(self, status, action):
        with pytest.raises(InvalidOrderStatus):
            lifecycle.plan_transition(
                status, action, UserRole.SUPERADMIN, target=OrderStatus.PENDING_SETTING
            )

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES))
    def test_terminal_states_have_no_outgoing_transitions(self, status):
        assert VALID_TRANSITIONS[status] == frozenset()

    def test_every_active_status_can_be_cancelled_or_returned(self):
        for status in OrderStatus.values:
            if status in TERMINAL_STATES:
                continue
            assert {OrderStatus.CANCELED, OrderStatus.RETURNED} <= VALID_TRANSITIONS[status]

    @pytest.mark.parametrize("department", list(Department))
    def test_stage_steps_are_valid_transitions(self, department):
        stage = DEPARTMENT_STAGES[department]
        assert stage.in_progress in VALID_TRANSITIONS[stage.pending]
        assert stage.next in VALID_TRANSITIONS[stage.in_progress]


# ===========================================================================
# Overdue and progress
# ===========================================================================


class TestOverdue:
    def test_older_active_order_is_overdue(self):
        assert lifecycle.is_overdue(date(2026, 10, 18), OrderStatus.IN_PRINT, date(2026, 10, 19))

    def test_order_from_today_is_not_overdue(self):
        assert not lifecycle.is_overdue(
            date(2026, 10, 19), OrderStatus.PENDING_SETTING, date(2026, 10, 19)
        )

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATES))
    def test_closed_orders_are_never_overdue(self, status):
        assert not lifecycle.is_overdue(date(2026, 1, 1), status, date(2026, 10, 19))


class TestProgress:
    def test_first_status(self):
        assert lifecycle.progress_percentage(OrderStatus.PENDING_SETTING) == 7

    def test_completed(self):
        assert lifecycle.progress_percentage(OrderStatus.COMPLETED) == 86

    def test_last_status_is_full(self):
        assert lifecycle.progress_percentage(OrderStatus.RETURNED) == 100

    def test_progress_grows_along_the_pipeline(self):
        values = [lifecycle.progress_percentage(s) for s in OrderStatus.values]
        assert values == sorted(values)
