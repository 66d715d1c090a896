"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime, timezone
from typing import Any, Dict, Type, TypeVar
from uuid import UUID, uuid4

E = TypeVar("E", bound="DomainEvent")


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe dict of every field, as stored in the outbox."""
        return {key: _jsonable(value) for key, value in asdict(self).items()}

    @classmethod
    def from_payload(cls: Type[E], payload: Dict[str, Any]) -> E:
        """Rebuild an event from its JSON outbox payload."""
        init_fields = {f.name for f in fields(cls) if f.init}
        kwargs = {k: v for k, v in payload.items() if k in init_fields}
        kwargs["aggregate_id"] = UUID(str(kwargs["aggregate_id"]))
        if "event_id" in kwargs:
            kwargs["event_id"] = UUID(str(kwargs["event_id"]))
        if isinstance(kwargs.get("occurred_on"), str):
            kwargs["occurred_on"] = datetime.fromisoformat(kwargs["occurred_on"])
        return cls(**kwargs)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value

class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
