"""Event and ticket status machines.

Statuses only move forward. Every write path checks its transition here
before touching storage.
"""

from enum import Enum

from ticketing.domain.errors import (
    EventAlreadyCancelledError,
    EventAlreadyFinishedError,
    InvalidTicketStatusError,
)


class EventStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class TicketStatus(str, Enum):
    RESERVED = "reserved"
    PAID = "paid"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.ACTIVE: frozenset({EventStatus.FINISHED, EventStatus.CANCELLED}),
    EventStatus.FINISHED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}

TICKET_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.RESERVED: frozenset(
        {TicketStatus.PAID, TicketStatus.CANCELLED, TicketStatus.EXPIRED}
    ),
    TicketStatus.PAID: frozenset(),
    TicketStatus.CANCELLED: frozenset(),
    TicketStatus.EXPIRED: frozenset(),
}


def ensure_event_mutable(status: EventStatus, event_id: object = None) -> None:
    """Raise unless the event is still active.

    Raises:
        EventAlreadyFinishedError: The event is finished.
        EventAlreadyCancelledError: The event is cancelled.
    """
    if status is EventStatus.FINISHED:
        raise EventAlreadyFinishedError(event_id)
    if status is EventStatus.CANCELLED:
        raise EventAlreadyCancelledError(event_id)


def ensure_event_transition(
    current: EventStatus, target: EventStatus, event_id: object = None
) -> None:
    if target not in EVENT_TRANSITIONS[current]:
        ensure_event_mutable(current, event_id)
        raise ValueError(f"Unsupported event transition {current.value} -> {target.value}")


def ensure_ticket_transition(current: TicketStatus, target: TicketStatus) -> None:
    if target not in TICKET_TRANSITIONS[current]:
        raise InvalidTicketStatusError(current.value, target.value)
