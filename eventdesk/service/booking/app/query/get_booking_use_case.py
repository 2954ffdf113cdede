from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from eventdesk.platform.config.di import Container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.cancel_or_expire_booking_use_case import (
    CancelOrExpireBookingUseCase,
)
from eventdesk.service.booking.app.dto.booking_dto import BookingWithTickets
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.domain.booking_errors import (
    BookingNotFoundError,
    InvalidStateTransitionError,
)
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus


class GetBookingUseCase:
    def __init__(self, *, booking_command_repo: IBookingCommandRepo) -> None:
        self.booking_command_repo = booking_command_repo
        self.closer = CancelOrExpireBookingUseCase(booking_command_repo=booking_command_repo)

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
    async def get_booking(
        self, *, booking_reference: str, now: Optional[datetime] = None
    ) -> BookingWithTickets:
        """Booking with its tickets; a pending booking past its hold is expired on read"""
        now = now or datetime.now(timezone.utc)
        booking = await self.booking_command_repo.get_by_reference(
            booking_reference=booking_reference
        )
        if booking is None:
            raise BookingNotFoundError(booking_reference)

        if booking.is_hold_expired(now):
            try:
                booking = await self.closer.close(
                    booking=booking, reason=BookingStatus.EXPIRED, now=now
                )
            except InvalidStateTransitionError:
                # Confirmed or cancelled in the meantime, report what is stored
                booking = await self.booking_command_repo.get_by_reference(
                    booking_reference=booking_reference
                )
                if booking is None:
                    raise BookingNotFoundError(booking_reference)

        tickets = await self.booking_command_repo.list_tickets(booking_id=booking.id)
        return BookingWithTickets(booking=booking, tickets=tickets)
