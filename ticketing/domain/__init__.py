from ticketing.domain.access import Actor, Role
from ticketing.domain.lifecycle import EventStatus, TicketStatus
from ticketing.domain.models import Event, EventDraft, Ticket
from ticketing.domain.value_objects import Capacity, EventId, Money, TicketId, UserId

__all__ = [
    "Actor",
    "Role",
    "Event",
    "EventDraft",
    "Ticket",
    "EventStatus",
    "TicketStatus",
    "EventId",
    "TicketId",
    "UserId",
    "Money",
    "Capacity",
]
