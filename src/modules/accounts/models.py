"""Profile: role and display name attached to a Django user."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.constants import MANAGER_ROLES, UserRole
from modules.core.models import BaseModel


class Profile(BaseModel):
    """One per user. A user without a profile cannot act on orders."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    role = models.CharField(max_length=32, choices=UserRole.choices)
    fullname = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "profiles"
        ordering = ["fullname"]

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    def __str__(self) -> str:
        return f"{self.fullname or self.user} ({self.role})"
