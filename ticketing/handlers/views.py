"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain error mapping to the exception handler
- Never contain business logic
- Never expose internal error details
"""

from collections.abc import Callable

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ticketing.container import build_event_service, build_ticket_service
from ticketing.domain import Actor, EventStatus, TicketStatus
from ticketing.handlers.serializers import (
    CapacityInputSerializer,
    EventFilterSerializer,
    EventInputSerializer,
    EventSerializer,
    ReservationInputSerializer,
    TicketFilterSerializer,
    TicketSerializer,
)
from ticketing.services.event_service import EventService
from ticketing.services.ticket_service import TicketService


def _actor(request: Request) -> Actor:
    return request.user.actor


def _event_status(request: Request) -> EventStatus | None:
    params = EventFilterSerializer(data=request.query_params)
    params.is_valid(raise_exception=True)
    value = params.validated_data["status"]
    return EventStatus(value) if value else None


def _ticket_status(request: Request) -> TicketStatus | None:
    params = TicketFilterSerializer(data=request.query_params)
    params.is_valid(raise_exception=True)
    value = params.validated_data["status"]
    return TicketStatus(value) if value else None


class EventView(APIView):
    service_factory: Callable[[], EventService] = staticmethod(build_event_service)

    @property
    def service(self) -> EventService:
        return self.service_factory()


class TicketView(APIView):
    service_factory: Callable[[], TicketService] = staticmethod(build_ticket_service)

    @property
    def service(self) -> TicketService:
        return self.service_factory()


class EventListView(EventView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        events = self.service.list_events(_actor(request), status=_event_status(request))
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        payload = EventInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = self.service.create_event(_actor(request), payload.to_draft())
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class OwnEventListView(EventView):
    """Handler for GET /api/events/mine"""

    def get(self, request: Request) -> Response:
        events = self.service.list_own_events(_actor(request), status=_event_status(request))
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(EventView):
    """Handler for GET/PUT/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = self.service.get_event(_actor(request), event_id)
        return Response(EventSerializer(event).data)

    def put(self, request: Request, event_id: str) -> Response:
        payload = EventInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = self.service.update_event(_actor(request), event_id, payload.to_draft())
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        self.service.delete_event(_actor(request), event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventCancelView(EventView):
    """Handler for POST /api/events/{event_id}/cancel"""

    def post(self, request: Request, event_id: str) -> Response:
        event = self.service.cancel_event(_actor(request), event_id)
        return Response(EventSerializer(event).data)


class EventCapacityView(EventView):
    """Handler for PUT /api/events/{event_id}/capacity"""

    def put(self, request: Request, event_id: str) -> Response:
        payload = CapacityInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        event = self.service.set_capacity(
            _actor(request), event_id, payload.validated_data["capacity"]
        )
        return Response(EventSerializer(event).data)


class EventTicketListView(TicketView):
    """Handler for GET /api/events/{event_id}/tickets"""

    def get(self, request: Request, event_id: str) -> Response:
        tickets = self.service.list_event_tickets(
            _actor(request), event_id, status=_ticket_status(request)
        )
        return Response(TicketSerializer(tickets, many=True).data)


class ReserveTicketsView(TicketView):
    """Handler for POST /api/tickets/reserve"""

    def post(self, request: Request) -> Response:
        payload = ReservationInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        tickets = self.service.reserve(
            _actor(request),
            payload.validated_data["event_id"],
            payload.validated_data["quantity"],
        )
        return Response(TicketSerializer(tickets, many=True).data, status=status.HTTP_201_CREATED)


class OwnTicketListView(TicketView):
    """Handler for GET /api/tickets/mine"""

    def get(self, request: Request) -> Response:
        tickets = self.service.list_own_tickets(_actor(request), status=_ticket_status(request))
        return Response(TicketSerializer(tickets, many=True).data)


class TicketDetailView(TicketView):
    """Handler for GET /api/tickets/{ticket_id}"""

    def get(self, request: Request, ticket_id: str) -> Response:
        ticket = self.service.get_ticket(_actor(request), ticket_id)
        return Response(TicketSerializer(ticket).data)


class TicketCancelView(TicketView):
    """Handler for POST /api/tickets/{ticket_id}/cancel"""

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = self.service.cancel_ticket(_actor(request), ticket_id)
        return Response(TicketSerializer(ticket).data)


class TicketPaymentView(TicketView):
    """Handler for POST /api/tickets/{ticket_id}/pay"""

    def post(self, request: Request, ticket_id: str) -> Response:
        ticket = self.service.confirm_payment(_actor(request), ticket_id)
        return Response(TicketSerializer(ticket).data)
