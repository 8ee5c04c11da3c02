"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    EVENT_NOT_ACTIVE = "EVENT_NOT_ACTIVE"
    EVENT_ALREADY_FINISHED = "EVENT_ALREADY_FINISHED"
    EVENT_ALREADY_CANCELLED = "EVENT_ALREADY_CANCELLED"
    INVALID_TICKET_STATUS = "INVALID_TICKET_STATUS"
    INSUFFICIENT_TICKETS = "INSUFFICIENT_TICKETS"
    QUANTITY_EXCEEDED = "QUANTITY_EXCEEDED"
    INVALID_ID = "INVALID_ID"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_CAPACITY = "INVALID_CAPACITY"
    EVENT_DATE_INVALID = "EVENT_DATE_INVALID"
    CAPACITY_BELOW_SOLD = "CAPACITY_BELOW_SOLD"
    STORAGE_ERROR = "STORAGE_ERROR"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced event or ticket does not exist."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: object) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket is not found."""

    def __init__(self, ticket_id: object) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
        self.ticket_id = ticket_id


class NotAuthorizedError(DomainError):
    """Raised when the actor's role or ownership forbids the operation."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(code=ErrorCode.NOT_AUTHORIZED, message=message)


class InvalidStateTransitionError(DomainError):
    """An event or ticket is in a status that forbids the operation."""


class EventNotActiveError(InvalidStateTransitionError):
    def __init__(self, event_id: object) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_ACTIVE, message="Event is not active")
        self.event_id = event_id


class EventAlreadyFinishedError(InvalidStateTransitionError):
    def __init__(self, event_id: object = None) -> None:
        super().__init__(
            code=ErrorCode.EVENT_ALREADY_FINISHED,
            message="Event already finished",
        )
        self.event_id = event_id


class EventAlreadyCancelledError(InvalidStateTransitionError):
    def __init__(self, event_id: object = None) -> None:
        super().__init__(
            code=ErrorCode.EVENT_ALREADY_CANCELLED,
            message="Event already cancelled",
        )
        self.event_id = event_id


class InvalidTicketStatusError(InvalidStateTransitionError):
    def __init__(self, current: object, target: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TICKET_STATUS,
            message=f"Cannot move ticket from {current} to {target}",
        )
        self.current = current
        self.target = target


class InsufficientTicketsError(DomainError):
    """Raised when remaining capacity is below the requested quantity."""

    def __init__(self, remaining: int, requested: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_TICKETS,
            message="Insufficient tickets",
        )
        self.remaining = remaining
        self.requested = requested


class QuantityExceededError(DomainError):
    """Raised when a single purchase asks for more than the per-purchase cap."""

    def __init__(self, maximum: int) -> None:
        super().__init__(
            code=ErrorCode.QUANTITY_EXCEEDED,
            message=f"Cannot reserve more than {maximum} tickets at once",
        )
        self.maximum = maximum


class ValidationError(DomainError):
    """Malformed input that passed format checks but breaks a domain rule."""


class InvalidIdError(ValidationError):
    def __init__(self, kind: str = "resource") -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {kind} ID format")


class InvalidQuantityError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message="Quantity must be at least 1",
        )


class InvalidCapacityError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CAPACITY,
            message="Capacity must be at least 1",
        )


class EventDateInvalidError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EVENT_DATE_INVALID,
            message="Event date must be in the future",
        )


class CapacityBelowSoldError(ValidationError):
    def __init__(self, capacity: int, sold: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_BELOW_SOLD,
            message=f"Capacity {capacity} is below the {sold} tickets already sold",
        )


class StorageError(DomainError):
    """Unclassified persistence failure. Details stay in the logs."""

    def __init__(self, message: str = "Storage failure") -> None:
        super().__init__(code=ErrorCode.STORAGE_ERROR, message=message)
