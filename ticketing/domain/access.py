"""Roles and authorization guards.

Every guard matches exhaustively on Role, so adding a role fails type
checking until each rule decides what it may do.
"""

from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from ticketing.domain.errors import NotAuthorizedError
from ticketing.domain.lifecycle import EventStatus
from ticketing.domain.models import Event, Ticket
from ticketing.domain.value_objects import UserId


class Role(str, Enum):
    USER = "user"
    ORGANIZER = "organizer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """The caller of an operation, as reported by the identity layer."""

    user_id: UserId
    role: Role


def can_create_events(actor: Actor) -> bool:
    match actor.role:
        case Role.ADMIN | Role.ORGANIZER:
            return True
        case Role.USER:
            return False
        case _:
            assert_never(actor.role)


def can_manage_event(actor: Actor, event: Event) -> bool:
    match actor.role:
        case Role.ADMIN:
            return True
        case Role.ORGANIZER:
            return event.organizer_id == actor.user_id
        case Role.USER:
            return False
        case _:
            assert_never(actor.role)


def can_view_event(actor: Actor, event: Event) -> bool:
    match actor.role:
        case Role.ADMIN:
            return True
        case Role.ORGANIZER:
            return event.organizer_id == actor.user_id or event.status is EventStatus.ACTIVE
        case Role.USER:
            return event.status is EventStatus.ACTIVE
        case _:
            assert_never(actor.role)


def can_act_on_ticket(actor: Actor, ticket: Ticket, event: Event) -> bool:
    match actor.role:
        case Role.ADMIN:
            return True
        case Role.ORGANIZER:
            return event.organizer_id == actor.user_id or ticket.user_id == actor.user_id
        case Role.USER:
            return ticket.user_id == actor.user_id
        case _:
            assert_never(actor.role)


def ensure_can_create_events(actor: Actor) -> None:
    if not can_create_events(actor):
        raise NotAuthorizedError("Only organizers and admins can manage events")


def ensure_can_manage_event(actor: Actor, event: Event) -> None:
    if not can_manage_event(actor, event):
        raise NotAuthorizedError("Not authorized to manage this event")


def ensure_can_view_event(actor: Actor, event: Event) -> None:
    if not can_view_event(actor, event):
        raise NotAuthorizedError("Not authorized to view this event")


def ensure_can_act_on_ticket(actor: Actor, ticket: Ticket, event: Event) -> None:
    if not can_act_on_ticket(actor, ticket, event):
        raise NotAuthorizedError("Not authorized to access this ticket")


def ensure_admin(actor: Actor) -> None:
    match actor.role:
        case Role.ADMIN:
            return
        case Role.ORGANIZER | Role.USER:
            raise NotAuthorizedError("Admin role required")
        case _:
            assert_never(actor.role)
