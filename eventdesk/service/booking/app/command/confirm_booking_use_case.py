from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from eventdesk.platform.config.di import Container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.platform.metrics.booking_metrics import metrics
from eventdesk.service.booking.app.command.cancel_or_expire_booking_use_case import (
    CancelOrExpireBookingUseCase,
)
from eventdesk.service.booking.app.dto.booking_dto import BookingWithTickets
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.domain.booking_errors import (
    BookingExpiredError,
    BookingNotFoundError,
    InvalidStateTransitionError,
)
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import issue_tickets
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus


class ConfirmBookingUseCase:
    """
    Payment-confirmation step: pending -> confirmed, one ticket per seat

    Confirming an already confirmed booking returns the stored booking and
    tickets, so a retried payment callback never issues tickets twice.
    A pending booking whose hold has run out is expired instead.
    """

    def __init__(self, *, booking_command_repo: IBookingCommandRepo) -> None:
        self.booking_command_repo = booking_command_repo
        self.closer = CancelOrExpireBookingUseCase(booking_command_repo=booking_command_repo)
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
    async def confirm_booking(
        self, *, booking_reference: str, now: Optional[datetime] = None
    ) -> BookingWithTickets:
        now = now or datetime.now(timezone.utc)

        with self.tracer.start_as_current_span(
            'use_case.confirm_booking',
            attributes={'booking.reference': booking_reference},
        ):
            booking = await self.booking_command_repo.get_by_reference(
                booking_reference=booking_reference
            )
            if booking is None:
                raise BookingNotFoundError(booking_reference)

            if booking.status == BookingStatus.CONFIRMED:
                return await self._existing(booking)

            if booking.is_hold_expired(now):
                await self.closer.close(booking=booking, reason=BookingStatus.EXPIRED, now=now)
                raise BookingExpiredError(booking_reference)

            confirmed = booking.confirm(now=now)
            tickets = issue_tickets(confirmed, now=now)
            stored = await self.booking_command_repo.confirm_booking_and_issue_tickets(
                booking=confirmed, tickets=tickets
            )
            if stored is None:
                # Lost a race: either a concurrent confirm (fine) or a cancel / expire
                current = await self.booking_command_repo.get_by_reference(
                    booking_reference=booking_reference
                )
                if current is not None and current.status == BookingStatus.CONFIRMED:
                    return await self._existing(current)
                current_status = current.status if current else 'missing'
                raise InvalidStateTransitionError(
                    f'Booking {booking_reference} is {current_status}, cannot be confirmed'
                )

            metrics.record_transition(to_status=str(BookingStatus.CONFIRMED))
            Logger.base.info(
                f'🎫 [BOOKING] {booking_reference} confirmed, {len(tickets)} ticket(s) issued'
            )
            return BookingWithTickets(booking=stored, tickets=tickets)

    async def _existing(self, booking: Booking) -> BookingWithTickets:
        tickets = await self.booking_command_repo.list_tickets(booking_id=booking.id)
        return BookingWithTickets(booking=booking, tickets=tickets)
