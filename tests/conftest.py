"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from tests.fakes import (
    FakeClock,
    InMemoryCapacityLedger,
    InMemoryEventStore,
    InMemoryState,
    InMemoryTicketStore,
    make_actor,
)
from ticketing.domain import Actor, Capacity, EventDraft, Money, Role
from ticketing.services.event_service import EventService
from ticketing.services.sweeper import ExpirySweeper
from ticketing.services.ticket_service import TicketService


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def admin() -> Actor:
    return make_actor(Role.ADMIN)


@pytest.fixture
def organizer() -> Actor:
    return make_actor(Role.ORGANIZER)


@pytest.fixture
def other_organizer() -> Actor:
    return make_actor(Role.ORGANIZER)


@pytest.fixture
def user() -> Actor:
    return make_actor(Role.USER)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state(clock: FakeClock) -> InMemoryState:
    return InMemoryState(clock)


@pytest.fixture
def event_store(state: InMemoryState) -> InMemoryEventStore:
    return InMemoryEventStore(state)


@pytest.fixture
def ticket_store(state: InMemoryState) -> InMemoryTicketStore:
    return InMemoryTicketStore(state)


@pytest.fixture
def ledger(state: InMemoryState) -> InMemoryCapacityLedger:
    return InMemoryCapacityLedger(state)


@pytest.fixture
def event_service(event_store, ledger, ticket_store, clock) -> EventService:
    return EventService(event_store, ledger, ticket_store, clock)


@pytest.fixture
def ticket_service(event_store, ticket_store, ledger, clock) -> TicketService:
    return TicketService(event_store, ticket_store, ledger, clock)


@pytest.fixture
def sweeper(event_store, ticket_store, ledger, clock) -> ExpirySweeper:
    return ExpirySweeper(event_store, ticket_store, ledger, clock)


@pytest.fixture
def make_draft(clock: FakeClock):
    def factory(capacity: int = 10, price: str = "25.00", days_ahead: int = 7, **overrides):
        fields = {
            "title": "Concert",
            "description": "An evening show",
            "location": "Main Hall",
            "date": clock.now() + timedelta(days=days_ahead),
            "capacity": Capacity(capacity),
            "price": Money(Decimal(price)),
        }
        fields.update(overrides)
        return EventDraft(**fields)

    return factory
