"""Service wiring for the Django-backed deployment.

Handlers and runners call these factories; tests construct services
directly with in-memory stores.
"""

from datetime import timedelta

from django.conf import settings

from ticketing.clock import SystemClock
from ticketing.services.event_service import EventService
from ticketing.services.sweeper import ExpirySweeper
from ticketing.services.ticket_service import TicketService
from ticketing.stores.django_store import DjangoCapacityLedger, DjangoEventStore, DjangoTicketStore


def _db_timeout() -> float | None:
    timeout_ms = settings.TICKETING_DB_TIMEOUT_MS
    return timeout_ms / 1000 if timeout_ms else None


def build_event_service() -> EventService:
    return EventService(
        store=DjangoEventStore(),
        ledger=DjangoCapacityLedger(),
        tickets=DjangoTicketStore(),
        clock=SystemClock(),
        release_capacity=settings.TICKETING_RELEASE_CAPACITY_ON_EXPIRY,
        timeout=_db_timeout(),
    )


def build_ticket_service() -> TicketService:
    return TicketService(
        events=DjangoEventStore(),
        tickets=DjangoTicketStore(),
        ledger=DjangoCapacityLedger(),
        clock=SystemClock(),
        max_per_purchase=settings.TICKETING_MAX_TICKETS_PER_PURCHASE,
        release_capacity=settings.TICKETING_RELEASE_CAPACITY_ON_EXPIRY,
        timeout=_db_timeout(),
    )


def build_sweeper() -> ExpirySweeper:
    return ExpirySweeper(
        events=DjangoEventStore(),
        tickets=DjangoTicketStore(),
        ledger=DjangoCapacityLedger(),
        clock=SystemClock(),
        reservation_window=timedelta(minutes=settings.TICKETING_RESERVATION_WINDOW_MINUTES),
        release_capacity=settings.TICKETING_RELEASE_CAPACITY_ON_EXPIRY,
        timeout=_db_timeout(),
    )
