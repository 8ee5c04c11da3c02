"""Event service - all event business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from typing import assert_never

from ticketing.clock import Clock
from ticketing.domain import Actor, Event, EventDraft, EventId, EventStatus, Role, TicketId
from ticketing.domain.access import (
    ensure_admin,
    ensure_can_create_events,
    ensure_can_manage_event,
    ensure_can_view_event,
)
from ticketing.domain.errors import (
    CapacityBelowSoldError,
    EventDateInvalidError,
    EventNotFoundError,
    InvalidCapacityError,
    InvalidIdError,
)
from ticketing.domain.lifecycle import ensure_event_mutable, ensure_event_transition
from ticketing.stores.interfaces import CapacityLedger, EventStore, TicketStore

logger = logging.getLogger(__name__)


def parse_event_id(raw: str) -> EventId:
    try:
        return EventId.from_string(raw)
    except ValueError:
        raise InvalidIdError("event") from None


def parse_ticket_id(raw: str) -> TicketId:
    try:
        return TicketId.from_string(raw)
    except ValueError:
        raise InvalidIdError("ticket") from None


class EventService:
    """Service for event lifecycle operations."""

    def __init__(
        self,
        store: EventStore,
        ledger: CapacityLedger,
        tickets: TicketStore,
        clock: Clock,
        release_capacity: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._ledger = ledger
        self._tickets = tickets
        self._clock = clock
        self._release_capacity = release_capacity
        self._timeout = timeout

    def create_event(self, actor: Actor, draft: EventDraft) -> Event:
        """Create an active event owned by the actor.

        Raises:
            NotAuthorizedError: If the actor is an ordinary user.
            EventDateInvalidError: If the date is not in the future.
            InvalidCapacityError: If capacity is below 1.
        """
        ensure_can_create_events(actor)
        self._validate(draft)
        event = self._store.add_event(draft, actor.user_id)
        logger.info(
            "Event created",
            extra={"event_id": str(event.id), "organizer_id": str(actor.user_id)},
        )
        return event

    def get_event(self, actor: Actor, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            NotAuthorizedError: If the actor may not see this event.
        """
        event = self._require(parse_event_id(event_id))
        ensure_can_view_event(actor, event)
        return event

    def list_events(self, actor: Actor, status: EventStatus | None = None) -> list[Event]:
        """Return the public catalog. Only admins may look past active events."""
        match actor.role:
            case Role.ADMIN:
                return self._store.list_events(status=status)
            case Role.ORGANIZER | Role.USER:
                return self._store.list_events(status=EventStatus.ACTIVE)
            case _:
                assert_never(actor.role)

    def list_own_events(self, actor: Actor, status: EventStatus | None = None) -> list[Event]:
        ensure_can_create_events(actor)
        return self._store.list_events(status=status, organizer_id=actor.user_id)

    def update_event(self, actor: Actor, event_id: str, draft: EventDraft) -> Event:
        """Replace an active event's details.

        Tickets already issued keep the price they were reserved at.

        Raises:
            EventAlreadyFinishedError, EventAlreadyCancelledError: If the
                event is no longer active.
            CapacityBelowSoldError: If the new capacity is below tickets_sold.
        """
        eid = parse_event_id(event_id)
        with self._store.atomic(self._timeout):
            event = self._require(eid, for_update=True)
            ensure_can_manage_event(actor, event)
            ensure_event_mutable(event.status, eid)
            self._validate(draft)
            if draft.capacity.value < event.tickets_sold:
                raise CapacityBelowSoldError(draft.capacity.value, event.tickets_sold)
            updated = self._store.save_details(eid, draft)
        logger.info("Event updated", extra={"event_id": str(eid)})
        return updated

    def cancel_event(self, actor: Actor, event_id: str) -> Event:
        """Move an active event to cancelled and cancel its open reservations."""
        return self._close(actor, parse_event_id(event_id), reason="cancel")

    def delete_event(self, actor: Actor, event_id: str) -> Event:
        """Soft delete: the event is cancelled, never removed."""
        return self._close(actor, parse_event_id(event_id), reason="delete")

    def set_capacity(self, actor: Actor, event_id: str, capacity: int) -> Event:
        """Administrative capacity override. The sold count is not re-checked."""
        ensure_admin(actor)
        if capacity < 1:
            raise InvalidCapacityError()
        eid = parse_event_id(event_id)
        with self._store.atomic(self._timeout):
            self._ledger.set_capacity(eid, capacity)
            event = self._require(eid)
        if event.remaining < 0:
            logger.warning(
                "Capacity set below tickets sold",
                extra={"event_id": str(eid), "capacity": capacity, "sold": event.tickets_sold},
            )
        return event

    def _close(self, actor: Actor, eid: EventId, reason: str) -> Event:
        with self._store.atomic(self._timeout):
            event = self._require(eid, for_update=True)
            ensure_can_manage_event(actor, event)
            ensure_event_transition(event.status, EventStatus.CANCELLED, eid)
            self._store.set_status(eid, EventStatus.CANCELLED)
            released = self._tickets.cancel_reservations_for_event(eid)
            if released and self._release_capacity:
                self._ledger.release_sold(eid, released)
            closed = self._require(eid)
        logger.info(
            "Event cancelled",
            extra={"event_id": str(eid), "reason": reason, "tickets_cancelled": released},
        )
        return closed

    def _require(self, eid: EventId, for_update: bool = False) -> Event:
        event = self._store.get_event(eid, for_update=for_update)
        if event is None:
            raise EventNotFoundError(eid)
        return event

    def _validate(self, draft: EventDraft) -> None:
        if draft.date <= self._clock.now():
            raise EventDateInvalidError()
        if draft.capacity.value < 1:
            raise InvalidCapacityError()
