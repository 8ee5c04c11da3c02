"""Serializers for request validation and domain model responses.

Input serializers only check shape and format; domain rules (future date,
capacity against tickets sold, purchase cap) are enforced by the services.
"""

from decimal import Decimal

from rest_framework import serializers

from ticketing.domain import Capacity, EventDraft, EventStatus, Money, TicketStatus


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    date = serializers.DateTimeField()
    capacity = serializers.IntegerField(source="capacity.value")
    ticketsSold = serializers.IntegerField(source="tickets_sold")
    remaining = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, source="price.amount")
    status = serializers.CharField(source="status.value")
    organizerId = serializers.UUIDField(source="organizer_id.value")
    createdAt = serializers.DateTimeField(source="created_at")


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.UUIDField(source="id.value")
    eventId = serializers.UUIDField(source="event_id.value")
    status = serializers.CharField(source="status.value")
    reservedAt = serializers.DateTimeField(source="reserved_at")
    paidAt = serializers.DateTimeField(source="paid_at")
    price = serializers.DecimalField(max_digits=10, decimal_places=2, source="price.amount")


class EventInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    location = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    date = serializers.DateTimeField()
    capacity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))

    def to_draft(self) -> EventDraft:
        data = self.validated_data
        return EventDraft(
            title=data["title"],
            description=data["description"],
            location=data["location"],
            date=data["date"],
            capacity=Capacity(data["capacity"]),
            price=Money(data["price"]),
        )


class ReservationInputSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    quantity = serializers.IntegerField()


class CapacityInputSerializer(serializers.Serializer):
    capacity = serializers.IntegerField()


class EventFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[s.value for s in EventStatus], required=False, allow_null=True, default=None
    )


class TicketFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[s.value for s in TicketStatus], required=False, allow_null=True, default=None
    )
