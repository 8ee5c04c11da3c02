"""Django ORM implementation of the ticketing stores.

Every method converts rows to domain models; database failures surface as
StorageError with the original exception chained and logged.
"""

import functools
import logging
from collections import Counter
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import ParamSpec, TypeVar

from django.db import DatabaseError, connection, transaction
from django.db.models import F, IntegerField, Value
from django.db.models.functions import Greatest

from ticketing import models
from ticketing.domain import (
    Capacity,
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
from ticketing.domain.errors import EventNotFoundError, StorageError, TicketNotFoundError
from ticketing.stores.interfaces import CapacityLedger, EventStore, TicketStore

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _storage_errors(method: Callable[P, R]) -> Callable[P, R]:
    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Storage operation %s failed", method.__qualname__)
            raise StorageError() from exc

    return wrapper


def _apply_timeout(timeout: float) -> None:
    """Bound statements and lock waits for the rest of the transaction."""
    if connection.vendor != "postgresql":
        return
    limit = f"{max(int(timeout * 1000), 1)}ms"
    with connection.cursor() as cursor:
        cursor.execute(
            "SELECT set_config('statement_timeout', %s, true), "
            "set_config('lock_timeout', %s, true)",
            [limit, limit],
        )


def _to_domain_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        title=row.title,
        description=row.description,
        location=row.location,
        date=row.date,
        capacity=Capacity(row.capacity),
        tickets_sold=row.tickets_sold,
        price=Money(row.price),
        status=EventStatus(row.status),
        organizer_id=UserId(row.organizer_id),
        created_at=row.created_at,
    )


def _to_domain_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id) if row.user_id is not None else None,
        status=TicketStatus(row.status),
        reserved_at=row.reserved_at,
        paid_at=row.paid_at,
        price=Money(row.price),
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Relational event store using the Django ORM."""

    @contextmanager
    def atomic(self, timeout: float | None = None) -> Iterator[None]:
        try:
            with transaction.atomic():
                if timeout is not None:
                    _apply_timeout(timeout)
                yield
        except DatabaseError as exc:
            logger.exception("Transaction rolled back", extra={"timeout": timeout})
            raise StorageError() from exc

    @_storage_errors
    def add_event(self, draft: EventDraft, organizer_id: UserId) -> Event:
        row = models.Event.objects.create(
            organizer_id=organizer_id.value,
            title=draft.title,
            description=draft.description,
            location=draft.location,
            date=draft.date,
            capacity=draft.capacity.value,
            tickets_sold=0,
            price=draft.price.amount,
            status=models.Event.Status.ACTIVE,
        )
        return _to_domain_event(row)

    @_storage_errors
    def get_event(self, event_id: EventId, for_update: bool = False) -> Event | None:
        queryset = models.Event.objects.filter(pk=event_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return _to_domain_event(row) if row is not None else None

    @_storage_errors
    def list_events(
        self, status: EventStatus | None = None, organizer_id: UserId | None = None
    ) -> list[Event]:
        queryset = models.Event.objects.order_by("-created_at")
        if status is not None:
            queryset = queryset.filter(status=status.value)
        if organizer_id is not None:
            queryset = queryset.filter(organizer_id=organizer_id.value)
        return [_to_domain_event(row) for row in queryset]

    @_storage_errors
    def save_details(self, event_id: EventId, draft: EventDraft) -> Event:
        updated = models.Event.objects.filter(pk=event_id.value).update(
            title=draft.title,
            description=draft.description,
            location=draft.location,
            date=draft.date,
            capacity=draft.capacity.value,
            price=draft.price.amount,
        )
        if updated == 0:
            raise EventNotFoundError(event_id)
        return _to_domain_event(models.Event.objects.get(pk=event_id.value))

    @_storage_errors
    def set_status(self, event_id: EventId, status: EventStatus) -> None:
        updated = models.Event.objects.filter(pk=event_id.value).update(status=status.value)
        if updated == 0:
            raise EventNotFoundError(event_id)

    @_storage_errors
    def finish_past_events(self, now: datetime) -> int:
        return models.Event.objects.filter(
            status=models.Event.Status.ACTIVE, date__lt=now
        ).update(status=models.Event.Status.FINISHED)


class DjangoCapacityLedger(CapacityLedger):
    """Capacity counters stored on the event row."""

    @_storage_errors
    def get_remaining_capacity(self, event_id: EventId) -> int:
        row = (
            models.Event.objects.filter(pk=event_id.value)
            .values_list("capacity", "tickets_sold")
            .first()
        )
        if row is None:
            raise EventNotFoundError(event_id)
        capacity, sold = row
        return capacity - sold

    @_storage_errors
    def increment_sold(self, event_id: EventId, by: int) -> None:
        if by < 0:
            raise ValueError("increment must be non-negative")
        updated = models.Event.objects.filter(pk=event_id.value).update(
            tickets_sold=F("tickets_sold") + by
        )
        if updated == 0:
            raise EventNotFoundError(event_id)

    @_storage_errors
    def release_sold(self, event_id: EventId, by: int) -> None:
        if by < 0:
            raise ValueError("release must be non-negative")
        updated = models.Event.objects.filter(pk=event_id.value).update(
            tickets_sold=Greatest(F("tickets_sold") - by, Value(0), output_field=IntegerField())
        )
        if updated == 0:
            raise EventNotFoundError(event_id)

    @_storage_errors
    def set_capacity(self, event_id: EventId, new_capacity: int) -> None:
        updated = models.Event.objects.filter(pk=event_id.value).update(capacity=new_capacity)
        if updated == 0:
            raise EventNotFoundError(event_id)


class DjangoTicketStore(TicketStore):
    """Relational ticket store using the Django ORM."""

    @_storage_errors
    def create_tickets(
        self,
        event_id: EventId,
        user_id: UserId | None,
        quantity: int,
        price: Money,
        reserved_at: datetime,
    ) -> list[Ticket]:
        rows = [
            models.Ticket(
                event_id=event_id.value,
                user_id=user_id.value if user_id is not None else None,
                status=models.Ticket.Status.RESERVED,
                reserved_at=reserved_at,
                price=price.amount,
            )
            for _ in range(quantity)
        ]
        created = models.Ticket.objects.bulk_create(rows)
        return [_to_domain_ticket(row) for row in created]

    @_storage_errors
    def get_ticket(self, ticket_id: TicketId, for_update: bool = False) -> Ticket | None:
        queryset = models.Ticket.objects.filter(pk=ticket_id.value)
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.first()
        return _to_domain_ticket(row) if row is not None else None

    @_storage_errors
    def list_for_user(self, user_id: UserId, status: TicketStatus | None = None) -> list[Ticket]:
        queryset = models.Ticket.objects.filter(user_id=user_id.value)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [_to_domain_ticket(row) for row in queryset.order_by("created_at", "id")]

    @_storage_errors
    def list_for_event(
        self, event_id: EventId, status: TicketStatus | None = None
    ) -> list[Ticket]:
        queryset = models.Ticket.objects.filter(event_id=event_id.value)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [_to_domain_ticket(row) for row in queryset.order_by("created_at", "id")]

    @_storage_errors
    def set_status(
        self, ticket_id: TicketId, status: TicketStatus, paid_at: datetime | None = None
    ) -> None:
        changes: dict[str, object] = {"status": status.value}
        if paid_at is not None:
            changes["paid_at"] = paid_at
        updated = models.Ticket.objects.filter(pk=ticket_id.value).update(**changes)
        if updated == 0:
            raise TicketNotFoundError(ticket_id)

    @_storage_errors
    def expire_reservations(self, cutoff: datetime) -> dict[EventId, int]:
        reserved = models.Ticket.objects.filter(
            status=models.Ticket.Status.RESERVED, reserved_at__lte=cutoff
        )
        with transaction.atomic():
            event_ids = list(
                reserved.order_by("event_id").values_list("event_id", flat=True).distinct()
            )
            if not event_ids:
                return {}
            # Event rows before ticket rows, in pk order.
            list(
                models.Event.objects.select_for_update()
                .filter(pk__in=event_ids)
                .order_by("pk")
                .values_list("pk", flat=True)
            )
            stale = list(
                reserved.select_for_update()
                .filter(event_id__in=event_ids)
                .order_by("pk")
                .values_list("id", "event_id")
            )
            if not stale:
                return {}
            models.Ticket.objects.filter(pk__in=[ticket_id for ticket_id, _ in stale]).update(
                status=models.Ticket.Status.EXPIRED
            )
        return dict(Counter(EventId(event_id) for _, event_id in stale))

    @_storage_errors
    def cancel_reservations_for_event(self, event_id: EventId) -> int:
        return models.Ticket.objects.filter(
            event_id=event_id.value, status=models.Ticket.Status.RESERVED
        ).update(status=models.Ticket.Status.CANCELLED)
