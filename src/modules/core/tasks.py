"""Asynchronous tasks of the core module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size=None):
    """Hand pending outbox events to the in-process event bus.

    Each event is processed in its own transaction with a row lock, so two
    workers never publish the same event twice. Handler failures mark the
    event ``FAILED`` and it is retried until ``OUTBOX_MAX_RETRIES``.
    """
    max_retries = settings.OUTBOX_MAX_RETRIES
    limit = batch_size or settings.OUTBOX_BATCH_SIZE
    ids = list(
        OutboxEvent.objects.relayable(max_retries).values_list("id", flat=True)[:limit]
    )

    published = failed = 0
    for event_id in ids:
        with transaction.atomic():
            outbox = (
                OutboxEvent.objects.select_for_update()
                .relayable(max_retries)
                .filter(id=event_id)
                .first()
            )
            if outbox is None:
                continue

            log = logger.bind(
                outbox_id=str(outbox.id),
                event_type=outbox.event_type,
                aggregate_id=outbox.aggregate_id,
            )
            event_class = event_bus.resolve(outbox.event_type)
            if event_class is None:
                outbox.mark_as_failed(f"No subscriber for {outbox.event_type}.")
                log.warning("outbox.unknown_event")
                failed += 1
                continue

            try:
                event_bus.publish(event_class.from_payload(outbox.payload))
            except Exception as exc:  # noqa: BLE001
                outbox.mark_as_failed(str(exc))
                log.exception("outbox.relay_failed", retry_count=outbox.retry_count)
                failed += 1
                continue

            outbox.mark_as_published()
            log.info("outbox.relayed")
            published += 1

    return {"published": published, "failed": failed}
