"""Account DTOs.

``ActorDTO`` is the identity every order command is performed as.
``WorkspaceStateDTO`` is the per-user state that survives a page reload:
the last opened view and an unsent order-input draft.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from modules.accounts.constants import MANAGER_ROLES, UNKNOWN_ACTOR, UserRole, ViewType

if TYPE_CHECKING:
    from modules.accounts.models import Profile


class ActorDTO(BaseModel):
    """Immutable identity of the user performing an action."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[int] = None
    role: UserRole
    display_name: str

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN

    @classmethod
    def from_profile(cls, profile: Profile) -> ActorDTO:
        """Display name: full name, else the role, else ``UNKNOWN``."""
        name = (profile.fullname or "").strip() or profile.role or UNKNOWN_ACTOR
        return cls(user_id=profile.user_id, role=profile.role, display_name=name)


class OrderDraftDTO(BaseModel):
    """Partially filled order-input form. Every field is optional."""

    model_config = ConfigDict(frozen=True)

    order_id: Optional[str] = None
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    size: Optional[str] = None
    quantity: Optional[int] = None
    back_name: Optional[str] = None
    back_number: Optional[str] = None
    marketplace: Optional[str] = None
    expedition: Optional[str] = None
    tracking_number: Optional[str] = None
    order_date: Optional[date] = None
    order_type: Optional[str] = None


class WorkspaceStateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_view: Optional[ViewType] = None
    order_draft: Optional[OrderDraftDTO] = None

    def to_cache(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_cache(cls, data: Optional[Dict[str, Any]]) -> WorkspaceStateDTO:
        if not data:
            return cls()
        return cls.model_validate(data)
