"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        ACTIVE = "active"
        FINISHED = "finished"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer_id = models.UUIDField(db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    date = models.DateTimeField()
    capacity = models.PositiveIntegerField()
    tickets_sold = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "date"], name="event_status_date_idx"),
            models.Index(fields=["organizer_id", "status"], name="event_organizer_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1), name="event_capacity_positive"
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0), name="event_price_non_negative"
            ),
        ]

    def __str__(self) -> str:
        return self.title


class Ticket(models.Model):
    """Persistence model for tickets. Rows are status-updated, never deleted."""

    class Status(models.TextChoices):
        RESERVED = "reserved"
        PAID = "paid"
        CANCELLED = "cancelled"
        EXPIRED = "expired"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="tickets")
    user_id = models.UUIDField(null=True, blank=True, db_index=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.RESERVED)
    reserved_at = models.DateTimeField()
    paid_at = models.DateTimeField(null=True, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status", "reserved_at"], name="ticket_status_reserved_idx"),
            models.Index(fields=["event", "status"], name="ticket_event_status_idx"),
            models.Index(fields=["user_id", "status"], name="ticket_user_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_id} - {self.status}"
