"""
Booking error taxonomy

Every error carries the HTTP status the exception handlers answer with.
"""

from eventdesk.platform.exception.exceptions import ConflictError, DomainError, NotFoundError


class CapacityExceededError(ConflictError):
    def __init__(self, *, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(f'Requested {requested} seats but only {available} available')


class PerUserLimitExceededError(DomainError):
    def __init__(self, *, requested: int, existing: int, limit: int) -> None:
        self.requested = requested
        self.existing = existing
        self.limit = limit
        super().__init__(
            f'Requested {requested} tickets with {existing} already booked exceeds '
            f'the limit of {limit} per user'
        )


class InvalidStateTransitionError(ConflictError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class BookingExpiredError(InvalidStateTransitionError):
    def __init__(self, booking_reference: str) -> None:
        self.booking_reference = booking_reference
        super().__init__(f'Booking {booking_reference} hold has expired')


class EventNotBookableError(DomainError):
    def __init__(self, message: str = 'Event is not open for booking') -> None:
        super().__init__(message)


class BookingWindowClosedError(DomainError):
    def __init__(self, message: str = 'Booking window is closed for this event') -> None:
        super().__init__(message)


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_reference: str) -> None:
        self.booking_reference = booking_reference
        super().__init__(f'Booking {booking_reference} not found')


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: object) -> None:
        self.event_id = event_id
        super().__init__(f'Event {event_id} not found')
