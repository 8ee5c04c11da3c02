"""Integration tests for the HTTP API.

These drive the full stack: gateway identity headers, DRF views, services
and the Django stores.
Run with: pytest tests/test_api.py -v
"""

import uuid
from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from ticketing import models
from ticketing.domain.errors import StorageError
from ticketing.stores.django_store import DjangoEventStore

ADMIN_ID = str(uuid.uuid4())
ORGANIZER_ID = str(uuid.uuid4())
OTHER_ORGANIZER_ID = str(uuid.uuid4())
USER_ID = str(uuid.uuid4())


def _as(client: APIClient, user_id: str, role: str) -> APIClient:
    client.credentials(HTTP_X_USER_ID=user_id, HTTP_X_USER_ROLE=role)
    return client


def _event_payload(**overrides) -> dict:
    payload = {
        "title": "Concert",
        "description": "Live music",
        "location": "Main Hall",
        "date": (timezone.now() + timedelta(days=10)).isoformat(),
        "capacity": 3,
        "price": "25.00",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def event_id(api_client: APIClient) -> str:
    response = _as(api_client, ORGANIZER_ID, "organizer").post(
        "/api/events", _event_payload(), format="json"
    )
    assert response.status_code == 201
    api_client.credentials()
    return response.json()["id"]


@pytest.mark.django_db
class TestAuthentication:
    """Identity headers from the gateway."""

    def test_missing_identity_is_unauthenticated(self, api_client: APIClient):
        response = api_client.get("/api/events")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    def test_malformed_user_id_rejected(self, api_client: APIClient):
        response = _as(api_client, "nope", "user").get("/api/events")
        assert response.status_code == 401

    def test_unknown_role_rejected(self, api_client: APIClient):
        response = _as(api_client, USER_ID, "superuser").get("/api/events")
        assert response.status_code == 401


@pytest.mark.django_db
class TestEventEndpoints:
    """Tests for /api/events"""

    def test_create_event(self, api_client: APIClient):
        response = _as(api_client, ORGANIZER_ID, "organizer").post(
            "/api/events", _event_payload(), format="json"
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["ticketsSold"] == 0
        assert body["capacity"] == 3
        assert body["price"] == "25.00"
        assert body["organizerId"] == ORGANIZER_ID

    def test_user_cannot_create_event(self, api_client: APIClient):
        response = _as(api_client, USER_ID, "user").post(
            "/api/events", _event_payload(), format="json"
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NOT_AUTHORIZED"

    def test_past_date_rejected(self, api_client: APIClient):
        past = (timezone.now() - timedelta(days=1)).isoformat()
        response = _as(api_client, ORGANIZER_ID, "organizer").post(
            "/api/events", _event_payload(date=past), format="json"
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EVENT_DATE_INVALID"

    def test_malformed_body_lists_fields(self, api_client: APIClient):
        response = _as(api_client, ORGANIZER_ID, "organizer").post(
            "/api/events", {"title": "x"}, format="json"
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_INPUT"
        assert "capacity" in error["fields"]

    def test_list_events(self, api_client: APIClient, event_id: str):
        response = _as(api_client, USER_ID, "user").get("/api/events")
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [event_id]

    def test_list_events_bad_status_filter(self, api_client: APIClient):
        response = _as(api_client, ADMIN_ID, "admin").get("/api/events?status=archived")
        assert response.status_code == 400

    def test_list_own_events(self, api_client: APIClient, event_id: str):
        mine = _as(api_client, ORGANIZER_ID, "organizer").get("/api/events/mine")
        theirs = _as(api_client, OTHER_ORGANIZER_ID, "organizer").get("/api/events/mine")
        assert [e["id"] for e in mine.json()] == [event_id]
        assert theirs.json() == []

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        response = _as(api_client, USER_ID, "user").get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    def test_get_event_not_found(self, api_client: APIClient):
        response = _as(api_client, USER_ID, "user").get(f"/api/events/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "EVENT_NOT_FOUND",
            "message": "Event not found",
        }

    def test_update_event(self, api_client: APIClient, event_id: str):
        response = _as(api_client, ORGANIZER_ID, "organizer").put(
            f"/api/events/{event_id}", _event_payload(title="Moved", capacity=5), format="json"
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Moved"
        assert response.json()["capacity"] == 5

    def test_foreign_organizer_cannot_cancel(self, api_client: APIClient, event_id: str):
        response = _as(api_client, OTHER_ORGANIZER_ID, "organizer").post(
            f"/api/events/{event_id}/cancel"
        )
        assert response.status_code == 403
        assert models.Event.objects.get(pk=event_id).status == models.Event.Status.ACTIVE

    def test_cancel_then_cancel_again(self, api_client: APIClient, event_id: str):
        client = _as(api_client, ORGANIZER_ID, "organizer")
        first = client.post(f"/api/events/{event_id}/cancel")
        second = client.post(f"/api/events/{event_id}/cancel")

        assert first.status_code == 200
        assert first.json()["status"] == "cancelled"
        assert second.status_code == 400
        assert second.json()["error"]["code"] == "EVENT_ALREADY_CANCELLED"

    def test_delete_is_soft(self, api_client: APIClient, event_id: str):
        client = _as(api_client, ORGANIZER_ID, "organizer")
        assert client.delete(f"/api/events/{event_id}").status_code == 204
        assert client.get(f"/api/events/{event_id}").json()["status"] == "cancelled"

    def test_set_capacity_admin_only(self, api_client: APIClient, event_id: str):
        denied = _as(api_client, ORGANIZER_ID, "organizer").put(
            f"/api/events/{event_id}/capacity", {"capacity": 10}, format="json"
        )
        allowed = _as(api_client, ADMIN_ID, "admin").put(
            f"/api/events/{event_id}/capacity", {"capacity": 10}, format="json"
        )
        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["capacity"] == 10

    def test_storage_failure_is_generic_500(self, api_client: APIClient):
        with mock.patch.object(DjangoEventStore, "list_events", side_effect=StorageError()):
            response = _as(api_client, USER_ID, "user").get("/api/events")
        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "STORAGE_ERROR",
            "message": "Internal server error",
        }


@pytest.mark.django_db
class TestTicketEndpoints:
    """Tests for /api/tickets"""

    def _reserve(self, client: APIClient, event_id: str, quantity: int):
        return client.post(
            "/api/tickets/reserve", {"event_id": event_id, "quantity": quantity}, format="json"
        )

    def test_reserve_returns_tickets(self, api_client: APIClient, event_id: str):
        response = self._reserve(_as(api_client, USER_ID, "user"), event_id, 2)

        assert response.status_code == 201
        tickets = response.json()
        assert len(tickets) == 2
        assert set(tickets[0]) == {"id", "eventId", "status", "reservedAt", "paidAt", "price"}
        assert tickets[0]["eventId"] == event_id
        assert tickets[0]["status"] == "reserved"
        assert tickets[0]["paidAt"] is None
        assert tickets[0]["price"] == "25.00"
        assert models.Event.objects.get(pk=event_id).tickets_sold == 2

    def test_sell_out(self, api_client: APIClient, event_id: str):
        client = _as(api_client, USER_ID, "user")
        assert self._reserve(client, event_id, 3).status_code == 201

        response = self._reserve(client, event_id, 1)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_TICKETS"
        assert models.Ticket.objects.filter(event_id=event_id).count() == 3

    def test_quantity_over_cap(self, api_client: APIClient, event_id: str):
        response = self._reserve(_as(api_client, USER_ID, "user"), event_id, 6)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "QUANTITY_EXCEEDED"

    def test_zero_quantity(self, api_client: APIClient, event_id: str):
        response = self._reserve(_as(api_client, USER_ID, "user"), event_id, 0)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_QUANTITY"

    def test_reserve_unknown_event(self, api_client: APIClient):
        response = self._reserve(_as(api_client, USER_ID, "user"), str(uuid.uuid4()), 1)
        assert response.status_code == 404

    def test_my_tickets_and_detail(self, api_client: APIClient, event_id: str):
        client = _as(api_client, USER_ID, "user")
        [ticket] = self._reserve(client, event_id, 1).json()

        mine = client.get("/api/tickets/mine")
        detail = client.get(f"/api/tickets/{ticket['id']}")
        stranger = _as(api_client, str(uuid.uuid4()), "user").get(f"/api/tickets/{ticket['id']}")

        assert [t["id"] for t in mine.json()] == [ticket["id"]]
        assert detail.json()["id"] == ticket["id"]
        assert stranger.status_code == 403

    def test_cancel_ticket_releases_seat(self, api_client: APIClient, event_id: str):
        client = _as(api_client, USER_ID, "user")
        [ticket] = self._reserve(client, event_id, 1).json()

        response = client.post(f"/api/tickets/{ticket['id']}/cancel")
        again = client.post(f"/api/tickets/{ticket['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert again.status_code == 400
        assert again.json()["error"]["code"] == "INVALID_TICKET_STATUS"
        assert models.Event.objects.get(pk=event_id).tickets_sold == 0

    def test_pay_requires_admin(self, api_client: APIClient, event_id: str):
        [ticket] = self._reserve(_as(api_client, USER_ID, "user"), event_id, 1).json()

        denied = api_client.post(f"/api/tickets/{ticket['id']}/pay")
        paid = _as(api_client, ADMIN_ID, "admin").post(f"/api/tickets/{ticket['id']}/pay")

        assert denied.status_code == 403
        assert paid.status_code == 200
        assert paid.json()["status"] == "paid"
        assert paid.json()["paidAt"] is not None

    def test_event_tickets_for_owner(self, api_client: APIClient, event_id: str):
        self._reserve(_as(api_client, USER_ID, "user"), event_id, 2)

        owner = _as(api_client, ORGANIZER_ID, "organizer").get(f"/api/events/{event_id}/tickets")
        user = _as(api_client, USER_ID, "user").get(f"/api/events/{event_id}/tickets")

        assert owner.status_code == 200
        assert len(owner.json()) == 2
        assert user.status_code == 403
