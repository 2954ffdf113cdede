from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from eventdesk.platform.config.di import Container
from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.platform.metrics.booking_metrics import metrics
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.domain.booking_errors import (
    BookingNotFoundError,
    InvalidStateTransitionError,
)
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus


CLOSING_REASONS = (BookingStatus.CANCELLED, BookingStatus.EXPIRED)


class CancelOrExpireBookingUseCase:
    """
    Close a pending booking and give its seats back

    Repeating the same close is a no-op: a booking already in the requested
    terminal status is returned unchanged and seats are not restored twice.
    """

    def __init__(self, *, booking_command_repo: IBookingCommandRepo) -> None:
        self.booking_command_repo = booking_command_repo
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
    ) -> Self:
        return cls(booking_command_repo=booking_command_repo)

    @Logger.io
    async def cancel_or_expire_booking(
        self,
        *,
        booking_reference: str,
        reason: BookingStatus = BookingStatus.CANCELLED,
        now: Optional[datetime] = None,
    ) -> Booking:
        if reason not in CLOSING_REASONS:
            raise DomainError(f'reason must be one of {", ".join(CLOSING_REASONS)}')

        with self.tracer.start_as_current_span(
            'use_case.cancel_or_expire_booking',
            attributes={'booking.reference': booking_reference, 'booking.reason': str(reason)},
        ):
            booking = await self.booking_command_repo.get_by_reference(
                booking_reference=booking_reference
            )
            if booking is None:
                raise BookingNotFoundError(booking_reference)
            return await self.close(booking=booking, reason=reason, now=now)

    async def close(
        self, *, booking: Booking, reason: BookingStatus, now: Optional[datetime] = None
    ) -> Booking:
        if booking.status == reason:
            return booking

        closed = booking.close(status=reason, now=now)
        stored = await self.booking_command_repo.release_seats_and_close_booking(booking=closed)
        if stored is None:
            # Lost a race with a concurrent confirm / cancel / expire
            current = await self.booking_command_repo.get_by_reference(
                booking_reference=booking.booking_reference
            )
            if current is not None and current.status == reason:
                return current
            current_status = current.status if current else 'missing'
            raise InvalidStateTransitionError(
                f'Booking {booking.booking_reference} is {current_status}, cannot become {reason}'
            )

        metrics.record_transition(to_status=str(reason))
        metrics.record_seats_released(reason=str(reason), quantity=stored.quantity)
        Logger.base.info(
            f'🔓 [BOOKING] {stored.booking_reference} {reason}, '
            f'{stored.quantity} seat(s) returned to event {stored.event_id}'
        )
        return stored
