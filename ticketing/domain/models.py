"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from ticketing.domain.lifecycle import EventStatus, TicketStatus
from ticketing.domain.value_objects import Capacity, EventId, Money, TicketId, UserId


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    description: str
    location: str
    date: datetime
    capacity: Capacity
    tickets_sold: int
    price: Money
    status: EventStatus
    organizer_id: UserId
    created_at: datetime

    @property
    def remaining(self) -> int:
        return self.capacity.value - self.tickets_sold


@dataclass(frozen=True)
class EventDraft:
    """Caller-supplied event fields for create and update."""

    title: str
    description: str
    location: str
    date: datetime
    capacity: Capacity
    price: Money


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    event_id: EventId
    user_id: UserId | None
    status: TicketStatus
    reserved_at: datetime
    paid_at: datetime | None
    price: Money
    created_at: datetime
