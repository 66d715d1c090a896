"""Unit tests for the outbox model and the relay task."""

from __future__ import annotations

from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.tasks import relay_outbox_events
from modules.orders.events import OrderCreated

pytestmark = pytest.mark.unit


def _outbox(event_type="OrderCreated", **overrides) -> OutboxEvent:
    event = OrderCreated(aggregate_id=uuid4(), status="PENDING_SETTING", actor="Owner")
    data = {
        "event_type": event_type,
        "aggregate_id": str(event.aggregate_id),
        "payload": event.to_payload(),
        "topic": "orders",
    }
    data.update(overrides)
    return OutboxEvent.objects.create(**data)


class TestOutboxModel:
    def test_relayable_excludes_published_and_exhausted(self):
        pending = _outbox()
        retry = _outbox(status=EventStatus.FAILED, retry_count=1)
        _outbox(status=EventStatus.PUBLISHED)
        _outbox(status=EventStatus.FAILED, retry_count=5)

        assert set(OutboxEvent.objects.relayable(5)) == {pending, retry}

    def test_mark_as_failed_counts_retries(self):
        outbox = _outbox()
        outbox.mark_as_failed("boom")
        outbox.refresh_from_db()
        assert outbox.status == EventStatus.FAILED
        assert outbox.retry_count == 1
        assert outbox.error_message == "boom"

    def test_mark_as_published(self):
        outbox = _outbox(status=EventStatus.FAILED, error_message="boom")
        outbox.mark_as_published()
        outbox.refresh_from_db()
        assert outbox.status == EventStatus.PUBLISHED
        assert outbox.processed_at is not None
        assert outbox.error_message is None


class TestRelayTask:
    def test_publishes_pending_events(self):
        outbox = _outbox()

        with patch("modules.orders.handlers.logger") as logger:
            result = relay_outbox_events()

        assert result == {"published": 1, "failed": 0}
        outbox.refresh_from_db()
        assert outbox.status == EventStatus.PUBLISHED
        assert logger.info.call_args.args == ("order.event.created",)

    def test_unknown_event_type_fails(self):
        outbox = _outbox(event_type="InvoiceIssued")

        result = relay_outbox_events()

        assert result == {"published": 0, "failed": 1}
        outbox.refresh_from_db()
        assert outbox.status == EventStatus.FAILED
        assert "InvoiceIssued" in outbox.error_message

    def test_handler_error_marks_failed(self):
        outbox = _outbox()

        with patch(
            "modules.orders.handlers.OrderCreatedHandler.handle",
            side_effect=RuntimeError("handler down"),
        ):
            result = relay_outbox_events()

        assert result == {"published": 0, "failed": 1}
        outbox.refresh_from_db()
        assert outbox.retry_count == 1
        assert outbox.error_message == "handler down"

    def test_batch_size(self):
        for _ in range(3):
            _outbox()

        result = relay_outbox_events(batch_size=2)

        assert result["published"] == 2
        assert OutboxEvent.objects.filter(status=EventStatus.PENDING).count() == 1

    def test_runs_through_celery(self):
        _outbox()
        result = relay_outbox_events.delay()
        assert result.get() == {"published": 1, "failed": 0}

    def test_beat_schedule(self, settings):
        schedule = settings.CELERY_BEAT_SCHEDULE["relay-outbox-events"]
        assert schedule["task"] == "core.relay_outbox_events"
