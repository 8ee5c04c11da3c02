"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Writes made by any
store inside an EventStore.atomic() scope commit or roll back together.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from ticketing.domain import (
    Event,
    EventDraft,
    EventId,
    EventStatus,
    Money,
    Ticket,
    TicketId,
    TicketStatus,
    UserId,
)


class CapacityLedger(ABC):
    """Per-event capacity accounting."""

    @abstractmethod
    def get_remaining_capacity(self, event_id: EventId) -> int:
        """Return capacity - tickets_sold.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    def increment_sold(self, event_id: EventId, by: int) -> None:
        """Add `by` to tickets_sold in a single statement.

        Raises:
            EventNotFoundError: If the event row no longer exists.
        """
        ...

    @abstractmethod
    def release_sold(self, event_id: EventId, by: int) -> None:
        """Subtract `by` from tickets_sold, never going below zero."""
        ...

    @abstractmethod
    def set_capacity(self, event_id: EventId, new_capacity: int) -> None:
        """Overwrite capacity without checking the sold count.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def atomic(self, timeout: float | None = None) -> AbstractContextManager[None]:
        """Open a transaction; `timeout` in seconds bounds each statement.

        Raises:
            StorageError: If the database fails inside the scope.
        """
        ...

    @abstractmethod
    def add_event(self, draft: EventDraft, organizer_id: UserId) -> Event:
        """Persist a new active event with tickets_sold = 0."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId, for_update: bool = False) -> Event | None:
        """Return an event by ID, or None if not found.

        With for_update the row stays locked until the enclosing atomic()
        scope ends.
        """
        ...

    @abstractmethod
    def list_events(
        self, status: EventStatus | None = None, organizer_id: UserId | None = None
    ) -> list[Event]:
        """Return events ordered by created_at descending."""
        ...

    @abstractmethod
    def save_details(self, event_id: EventId, draft: EventDraft) -> Event:
        """Overwrite the caller-editable fields. Never touches tickets_sold."""
        ...

    @abstractmethod
    def set_status(self, event_id: EventId, status: EventStatus) -> None:
        ...

    @abstractmethod
    def finish_past_events(self, now: datetime) -> int:
        """Mark every active event dated before `now` finished in one statement.

        Returns the number of events changed.
        """
        ...


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def create_tickets(
        self,
        event_id: EventId,
        user_id: UserId | None,
        quantity: int,
        price: Money,
        reserved_at: datetime,
    ) -> list[Ticket]:
        """Insert `quantity` reserved tickets; return them in creation order."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId, for_update: bool = False) -> Ticket | None:
        ...

    @abstractmethod
    def list_for_user(self, user_id: UserId, status: TicketStatus | None = None) -> list[Ticket]:
        ...

    @abstractmethod
    def list_for_event(
        self, event_id: EventId, status: TicketStatus | None = None
    ) -> list[Ticket]:
        ...

    @abstractmethod
    def set_status(
        self, ticket_id: TicketId, status: TicketStatus, paid_at: datetime | None = None
    ) -> None:
        ...

    @abstractmethod
    def expire_reservations(self, cutoff: datetime) -> dict[EventId, int]:
        """Expire reserved tickets with reserved_at <= cutoff.

        Locks the affected event rows, in pk order, before the ticket rows.
        Returns the number of tickets expired per event.
        """
        ...

    @abstractmethod
    def cancel_reservations_for_event(self, event_id: EventId) -> int:
        """Cancel every reserved ticket of an event; return how many changed."""
        ...
