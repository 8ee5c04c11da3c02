from ticketing.handlers.views import (
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

__all__ = [
    "EventCancelView",
    "EventCapacityView",
    "EventDetailView",
    "EventListView",
    "EventTicketListView",
    "OwnEventListView",
    "OwnTicketListView",
    "ReserveTicketsView",
    "TicketCancelView",
    "TicketDetailView",
    "TicketPaymentView",
]
