from django.urls import path

from ticketing.handlers import (
    EventCancelView,
    EventCapacityView,
    EventDetailView,
    EventListView,
    EventTicketListView,
    OwnEventListView,
    OwnTicketListView,
    ReserveTicketsView,
    TicketCancelView,
    TicketDetailView,
    TicketPaymentView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/mine", OwnEventListView.as_view(), name="event-mine"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/cancel", EventCancelView.as_view(), name="event-cancel"),
    path("events/<str:event_id>/capacity", EventCapacityView.as_view(), name="event-capacity"),
    path("events/<str:event_id>/tickets", EventTicketListView.as_view(), name="event-tickets"),
    path("tickets/reserve", ReserveTicketsView.as_view(), name="ticket-reserve"),
    path("tickets/mine", OwnTicketListView.as_view(), name="ticket-mine"),
    path("tickets/<str:ticket_id>", TicketDetailView.as_view(), name="ticket-detail"),
    path("tickets/<str:ticket_id>/cancel", TicketCancelView.as_view(), name="ticket-cancel"),
    path("tickets/<str:ticket_id>/pay", TicketPaymentView.as_view(), name="ticket-pay"),
]
