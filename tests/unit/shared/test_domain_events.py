"""Unit tests for domain event primitives and the in-memory bus."""

from __future__ import annotations

import json
from datetime import datetime
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import pytest

from modules.orders.events import OrderReturned
from shared.domain.events import DomainEvent, DomainEventMixin
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class TestDomainEvent:
    def test_event_name_is_class_name(self):
        assert OrderReturned(aggregate_id=uuid4()).event_name == "OrderReturned"

    def test_is_immutable(self):
        event = DomainEvent(aggregate_id=uuid4())
        with pytest.raises(AttributeError):
            event.aggregate_id = uuid4()

    def test_from_payload(self):
        aggregate_id = uuid4()
        payload = {
            "aggregate_id": str(aggregate_id),
            "event_id": str(uuid4()),
            "occurred_on": "2026-10-19T03:00:00+00:00",
            "event_name": "OrderReturned",
            "old_status": "READY_TO_SHIP",
            "return_date": "2026-10-25",
            "actor": "Owner",
            "unexpected": "ignored",
        }

        event = OrderReturned.from_payload(payload)

        assert event.aggregate_id == aggregate_id
        assert isinstance(event.event_id, UUID)
        assert event.occurred_on == datetime.fromisoformat("2026-10-19T03:00:00+00:00")
        assert event.return_date == "2026-10-25"
        assert event.event_name == "OrderReturned"


    def test_to_payload_is_json_safe(self):
        event = OrderReturned(aggregate_id=uuid4(), return_date="2026-10-25", actor="Owner")

        payload = event.to_payload()

        assert json.loads(json.dumps(payload)) == payload
        assert payload["aggregate_id"] == str(event.aggregate_id)
        assert payload["event_name"] == "OrderReturned"
        assert OrderReturned.from_payload(payload).event_id == event.event_id

class TestDomainEventMixin:
    def test_collects_and_clears(self):
        aggregate = DomainEventMixin()
        event = DomainEvent(aggregate_id=uuid4())

        aggregate.add_domain_event(event)
        assert aggregate.domain_events == [event]

        aggregate.clear_domain_events()
        assert aggregate.domain_events == []


class TestInMemoryEventBus:
    def test_routes_to_subscribers_of_the_type(self):
        bus = InMemoryEventBus()
        handler = MagicMock()
        bus.subscribe(OrderReturned, handler)

        event = OrderReturned(aggregate_id=uuid4())
        bus.publish(event)
        bus.publish(DomainEvent(aggregate_id=uuid4()))

        handler.handle.assert_called_once_with(event)

    def test_subscribing_twice_does_not_duplicate(self):
        bus = InMemoryEventBus()
        handler = MagicMock()
        bus.subscribe(OrderReturned, handler)
        bus.subscribe(OrderReturned, handler)

        bus.publish(OrderReturned(aggregate_id=uuid4()))

        assert handler.handle.call_count == 1

    def test_resolve(self):
        bus = InMemoryEventBus()
        bus.subscribe(OrderReturned, MagicMock())
        assert bus.resolve("OrderReturned") is OrderReturned
        assert bus.resolve("Unknown") is None
