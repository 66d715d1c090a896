"""DRF permission classes keyed on the caller's profile role."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated

from modules.accounts.exceptions import ProfileNotFound
from modules.accounts.services import resolve_actor


class HasProfile(IsAuthenticated):
    """Authenticated and carrying a profile.

    The resolved ``ActorDTO`` is cached on ``request.actor`` for the view.
    """

    message = "Profile not found for this user."

    def has_permission(self, request, view) -> bool:
        if not super().has_permission(request, view):
            return False
        actor = getattr(request, "actor", None)
        if actor is None:
            try:
                actor = resolve_actor(request.user)
            except ProfileNotFound:
                return False
            request.actor = actor
        return self.role_allowed(actor)

    def role_allowed(self, actor) -> bool:
        return True


class IsManager(HasProfile):
    message = "Only Super Admin and Admin Marketplace may perform this action."

    def role_allowed(self, actor) -> bool:
        return actor.is_manager


class IsSuperAdmin(HasProfile):
    message = "Only Super Admin may perform this action."

    def role_allowed(self, actor) -> bool:
        return actor.is_superadmin
