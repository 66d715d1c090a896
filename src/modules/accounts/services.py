"""Account services: actor resolution, view routing and the workspace."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from django.conf import settings
from django.core.cache import cache
from pydantic import ValidationError as PydanticValidationError

from modules.accounts.constants import MANAGER_ROLES, MANAGER_VIEWS, UserRole, ViewType
from modules.accounts.dtos import ActorDTO, OrderDraftDTO, WorkspaceStateDTO
from modules.accounts.exceptions import ProfileNotFound
from modules.accounts.models import Profile

logger = structlog.get_logger(__name__)


def resolve_actor(user: Any) -> ActorDTO:
    """Build the acting identity of an authenticated user.

    Raises:
        ProfileNotFound: the user has no profile.
    """
    profile = Profile.objects.filter(user_id=getattr(user, "pk", None)).first()
    if profile is None:
        logger.warning("account.profile_missing", user_id=getattr(user, "pk", None))
        raise ProfileNotFound("Profile not found for this user.")
    return ActorDTO.from_profile(profile)


def allowed_views(role: str) -> list[str]:
    if role not in MANAGER_ROLES:
        return [ViewType.TASKS]
    views = list(MANAGER_VIEWS)
    if role == UserRole.SUPERADMIN:
        views.append(ViewType.REPORT)
    return views


def resolve_view(role: str, saved_view: Optional[str] = None) -> ViewType:
    """Pick the view a user lands on.

    Department roles always get ``TASKS``. Managers get their saved view, or
    ``DASHBOARD`` when it is missing or not allowed for their role.
    """
    if role not in MANAGER_ROLES:
        return ViewType.TASKS
    if saved_view and saved_view in allowed_views(role):
        return ViewType(saved_view)
    return ViewType.DASHBOARD


class WorkspaceService:
    """Per-user workspace kept in the Django cache."""

    key_prefix = "workspace"

    def __init__(self, backend=None, timeout: Optional[int] = None) -> None:
        self._cache = backend if backend is not None else cache
        self._timeout = timeout if timeout is not None else settings.WORKSPACE_TTL_SECONDS

    def _key(self, user_id: Any) -> str:
        return f"{self.key_prefix}:{user_id}"

    def load(self, user_id: Any) -> WorkspaceStateDTO:
        raw = self._cache.get(self._key(user_id))
        try:
            return WorkspaceStateDTO.from_cache(raw)
        except PydanticValidationError:
            # Stale shape from an older release; start clean.
            logger.warning("workspace.discarded", user_id=user_id)
            self._cache.delete(self._key(user_id))
            return WorkspaceStateDTO()

    def save(
        self,
        user_id: Any,
        last_view: Optional[str] = None,
        order_draft: Optional[OrderDraftDTO] = None,
    ) -> WorkspaceStateDTO:
        """Merge the given parts into the stored workspace."""
        current = self.load(user_id)
        updates: dict[str, Any] = {}
        if last_view is not None:
            updates["last_view"] = ViewType(last_view)
        if order_draft is not None:
            updates["order_draft"] = order_draft
        state = current.model_copy(update=updates)
        self._cache.set(self._key(user_id), state.to_cache(), self._timeout)
        logger.info("workspace.saved", user_id=user_id, fields=sorted(updates))
        return state

    def clear_draft(self, user_id: Any) -> WorkspaceStateDTO:
        current = self.load(user_id)
        if current.order_draft is None:
            return current
        state = current.model_copy(update={"order_draft": None})
        self._cache.set(self._key(user_id), state.to_cache(), self._timeout)
        logger.info("workspace.draft_cleared", user_id=user_id)
        return state

    def clear(self, user_id: Any) -> None:
        self._cache.delete(self._key(user_id))
        logger.info("workspace.cleared", user_id=user_id)
