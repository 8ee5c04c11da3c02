"""Ticket service - reservations and ticket lifecycle.

The reservation path is the only writer that raises tickets_sold. It locks
the event row, re-reads status and remaining capacity, inserts the tickets
and bumps the counter inside one transaction.
"""

import logging

from ticketing.clock import Clock
from ticketing.domain import Actor, Event, EventId, Ticket, TicketId, TicketStatus
from ticketing.domain.access import ensure_admin, ensure_can_act_on_ticket, ensure_can_manage_event
from ticketing.domain.errors import (
    EventNotActiveError,
    EventNotFoundError,
    InsufficientTicketsError,
    InvalidQuantityError,
    QuantityExceededError,
    TicketNotFoundError,
)
from ticketing.domain.lifecycle import EventStatus, ensure_ticket_transition
from ticketing.services.event_service import parse_event_id, parse_ticket_id
from ticketing.stores.interfaces import CapacityLedger, EventStore, TicketStore

logger = logging.getLogger(__name__)

MAX_TICKETS_PER_PURCHASE = 5


class TicketService:
    """Service for ticket reservation and status changes."""

    def __init__(
        self,
        events: EventStore,
        tickets: TicketStore,
        ledger: CapacityLedger,
        clock: Clock,
        max_per_purchase: int = MAX_TICKETS_PER_PURCHASE,
        release_capacity: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._ledger = ledger
        self._clock = clock
        self._max_per_purchase = max_per_purchase
        self._release_capacity = release_capacity
        self._timeout = timeout

    def reserve(
        self, actor: Actor, event_id: str, quantity: int, timeout: float | None = None
    ) -> list[Ticket]:
        """Reserve `quantity` tickets for the actor.

        Returns the new tickets in creation order. On any failure nothing is
        written: no tickets exist and tickets_sold is unchanged.

        Raises:
            InvalidQuantityError: If quantity is below 1.
            QuantityExceededError: If quantity is above the per-purchase cap.
            InvalidIdError: If event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            EventNotActiveError: If the event is finished or cancelled.
            InsufficientTicketsError: If remaining capacity is below quantity.
            StorageError: If the transaction fails or times out.
        """
        if quantity < 1:
            raise InvalidQuantityError()
        if quantity > self._max_per_purchase:
            raise QuantityExceededError(self._max_per_purchase)
        eid = parse_event_id(event_id)

        with self._events.atomic(timeout if timeout is not None else self._timeout):
            event = self._events.get_event(eid, for_update=True)
            if event is None:
                raise EventNotFoundError(eid)
            if event.status is not EventStatus.ACTIVE:
                raise EventNotActiveError(eid)
            remaining = self._ledger.get_remaining_capacity(eid)
            if remaining < quantity:
                raise InsufficientTicketsError(remaining, quantity)
            tickets = self._tickets.create_tickets(
                eid,
                actor.user_id,
                quantity,
                price=event.price,
                reserved_at=self._clock.now(),
            )
            self._ledger.increment_sold(eid, quantity)

        logger.info(
            "Tickets reserved",
            extra={
                "event_id": str(eid),
                "user_id": str(actor.user_id),
                "quantity": quantity,
                "remaining": remaining - quantity,
            },
        )
        return tickets

    def get_ticket(self, actor: Actor, ticket_id: str) -> Ticket:
        ticket = self._require_ticket(parse_ticket_id(ticket_id))
        ensure_can_act_on_ticket(actor, ticket, self._require_event(ticket.event_id))
        return ticket

    def list_own_tickets(self, actor: Actor, status: TicketStatus | None = None) -> list[Ticket]:
        return self._tickets.list_for_user(actor.user_id, status=status)

    def list_event_tickets(
        self, actor: Actor, event_id: str, status: TicketStatus | None = None
    ) -> list[Ticket]:
        """Every ticket issued for an event. Owner organizer or admin only."""
        event = self._require_event(parse_event_id(event_id))
        ensure_can_manage_event(actor, event)
        return self._tickets.list_for_event(event.id, status=status)

    def cancel_ticket(self, actor: Actor, ticket_id: str) -> Ticket:
        """Cancel a reserved ticket.

        Raises:
            TicketNotFoundError: If the ticket does not exist.
            NotAuthorizedError: If the actor neither holds the ticket nor
                manages its event.
            InvalidTicketStatusError: If the ticket is not reserved.
        """
        tid = parse_ticket_id(ticket_id)
        with self._events.atomic(self._timeout):
            ticket = self._require_ticket(tid)
            # Event row first, then ticket row, same order as reserve.
            event = self._require_event(ticket.event_id, for_update=True)
            ticket = self._require_ticket(tid, for_update=True)
            ensure_can_act_on_ticket(actor, ticket, event)
            ensure_ticket_transition(ticket.status, TicketStatus.CANCELLED)
            self._tickets.set_status(tid, TicketStatus.CANCELLED)
            if self._release_capacity:
                self._ledger.release_sold(event.id, 1)
            cancelled = self._require_ticket(tid)

        logger.info(
            "Ticket cancelled",
            extra={"ticket_id": str(tid), "event_id": str(event.id), "by": str(actor.user_id)},
        )
        return cancelled

    def confirm_payment(self, actor: Actor, ticket_id: str) -> Ticket:
        """Mark a reserved ticket paid. Payment capture happens elsewhere."""
        ensure_admin(actor)
        tid = parse_ticket_id(ticket_id)
        with self._events.atomic(self._timeout):
            ticket = self._require_ticket(tid, for_update=True)
            ensure_ticket_transition(ticket.status, TicketStatus.PAID)
            self._tickets.set_status(tid, TicketStatus.PAID, paid_at=self._clock.now())
            paid = self._require_ticket(tid)
        logger.info("Ticket paid", extra={"ticket_id": str(tid), "event_id": str(paid.event_id)})
        return paid

    def _require_ticket(self, tid: TicketId, for_update: bool = False) -> Ticket:
        ticket = self._tickets.get_ticket(tid, for_update=for_update)
        if ticket is None:
            raise TicketNotFoundError(tid)
        return ticket

    def _require_event(self, eid: EventId, for_update: bool = False) -> Event:
        event = self._events.get_event(eid, for_update=for_update)
        if event is None:
            raise EventNotFoundError(eid)
        return event
