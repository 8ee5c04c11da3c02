"""Concurrent reservations against the real database.

Each thread uses its own connection, so the database transactions are the
only thing serializing the writers.
Run with: pytest tests/test_concurrency.py -v
"""

import threading
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import connection
from django.utils import timezone

from tests.fakes import make_actor
from ticketing import models
from ticketing.container import build_ticket_service
from ticketing.domain import Role
from ticketing.domain.errors import InsufficientTicketsError, StorageError


def _event(capacity: int) -> models.Event:
    return models.Event.objects.create(
        organizer_id=uuid.uuid4(),
        title="Arena",
        date=timezone.now() + timedelta(days=5),
        capacity=capacity,
        price=Decimal("30.00"),
    )


def _race(event_id: str, buyers: int, quantity: int = 1) -> list[str]:
    service = build_ticket_service()
    barrier = threading.Barrier(buyers)
    guard = threading.Lock()
    outcomes: list[str] = []

    def attempt():
        barrier.wait()
        try:
            service.reserve(make_actor(Role.USER), event_id, quantity)
            outcome = "ok"
        except InsufficientTicketsError:
            outcome = "sold_out"
        except StorageError:
            outcome = "storage_error"
        finally:
            connection.close()
        with guard:
            outcomes.append(outcome)

    threads = [threading.Thread(target=attempt) for _ in range(buyers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


@pytest.mark.django_db(transaction=True)
class TestConcurrentReservations:
    """Parallel buyers on one event."""

    def test_all_succeed_when_seats_remain(self):
        event = _event(capacity=100)

        outcomes = _race(str(event.pk), buyers=8)

        assert outcomes == ["ok"] * 8
        event.refresh_from_db()
        assert event.tickets_sold == 8
        assert models.Ticket.objects.filter(event=event).count() == 8

    def test_never_oversell(self):
        event = _event(capacity=5)

        outcomes = _race(str(event.pk), buyers=8)

        assert sorted(outcomes) == ["ok"] * 5 + ["sold_out"] * 3
        event.refresh_from_db()
        assert event.tickets_sold == 5
        assert models.Ticket.objects.filter(event=event).count() == 5
