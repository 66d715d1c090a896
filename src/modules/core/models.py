"""Shared abstract models and the transactional outbox.

Provides:
- ``BaseModel``: UUIDv7 primary key + ``created_at`` / ``updated_at``.
- ``SoftDeleteModel``: ``BaseModel`` plus soft delete through ``deleted_at``.
- ``OutboxEvent``: domain events persisted next to the data that produced
  them, relayed later by ``core.relay_outbox_events``.

``objects`` on soft-deletable models is unfiltered; read paths call
``.alive()`` explicitly.
"""

from __future__ import annotations

import uuid6
from django.db import models
from django.utils import timezone

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with a time-ordered UUIDv7 PK and timestamps."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        # auto_now fields are skipped when update_fields omits them
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Soft delete
# ---------------------------------------------------------------------------


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self) -> SoftDeleteQuerySet:
        return self.filter(deleted_at__isnull=True)

    def dead(self) -> SoftDeleteQuerySet:
        return self.filter(deleted_at__isnull=False)

    def delete(self) -> tuple[int, dict[str, int]]:
        """Bulk soft delete."""
        now = timezone.now()
        count = self.alive().update(deleted_at=now, updated_at=now)
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        return super().delete()


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Unfiltered manager exposing ``alive()`` / ``dead()``."""


class SoftDeleteModel(BaseModel):
    """Abstract model removed by stamping ``deleted_at`` instead of a DELETE."""

    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        default=None,
        db_index=True,
    )

    objects = SoftDeleteManager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def delete(self, using=None, keep_parents=False) -> tuple[int, dict[str, int]]:
        """Soft-delete this instance (no-op if already deleted)."""
        if self.is_deleted:
            return 0, {}
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at"])
        return 1, {self._meta.label: 1}

    def hard_delete(self, using=None, keep_parents=False) -> tuple[int, dict[str, int]]:
        return super().delete(using=using, keep_parents=keep_parents)

    def restore(self) -> None:
        if not self.is_deleted:
            return
        self.deleted_at = None
        self.save(update_fields=["deleted_at"])


# ---------------------------------------------------------------------------
# Transactional Outbox
# ---------------------------------------------------------------------------


class EventStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PUBLISHED = "PUBLISHED", "Published"
    FAILED = "FAILED", "Failed"


class OutboxEventQuerySet(models.QuerySet):
    def relayable(self, max_retries: int) -> OutboxEventQuerySet:
        """Pending events plus failed ones that still have retries left."""
        return self.filter(
            models.Q(status=EventStatus.PENDING)
            | models.Q(status=EventStatus.FAILED, retry_count__lt=max_retries)
        ).order_by("created_at")


class OutboxEvent(BaseModel):
    """Domain event written in the same transaction as the order change.

    Lifecycle: ``PENDING`` -> ``PUBLISHED`` once the relay task has handed
    it to the event bus, or ``FAILED`` (``retry_count`` incremented) when a
    handler raised.
    """

    event_type = models.CharField(max_length=100)
    payload = models.JSONField()
    aggregate_id = models.CharField(max_length=255)
    topic = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20,
        choices=EventStatus.choices,
        default=EventStatus.PENDING,
    )
    processed_at = models.DateTimeField(null=True, blank=True, default=None)
    error_message = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01
    retry_count = models.PositiveIntegerField(default=0)

    objects = OutboxEventQuerySet.as_manager()

    class Meta:
        db_table = "outbox_events"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["event_type"], name="outbox_event_type_idx"),
            models.Index(fields=["aggregate_id"], name="outbox_aggregate_id_idx"),
            models.Index(
                fields=["status", "created_at"],
                name="outbox_status_created_idx",
            ),
        ]

    def mark_as_published(self) -> None:
        self.status = EventStatus.PUBLISHED
        self.processed_at = timezone.now()
        self.error_message = None
        self.save(update_fields=["status", "processed_at", "error_message"])

    def mark_as_failed(self, error: str) -> None:
        self.status = EventStatus.FAILED
        self.error_message = error
        self.retry_count += 1
        self.save(update_fields=["status", "error_message", "retry_count"])

    def __str__(self) -> str:
        return f"{self.event_type} [{self.status}] ({self.aggregate_id})"
