from datetime import datetime, timezone
from typing import Optional

from opentelemetry import trace

from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.command.cancel_or_expire_booking_use_case import (
    CancelOrExpireBookingUseCase,
)
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.domain.booking_errors import InvalidStateTransitionError
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus


class ExpireStaleBookingsUseCase:
    """Expire every pending booking whose hold ran out, in batches"""

    def __init__(self, *, booking_command_repo: IBookingCommandRepo, batch_size: int = 100) -> None:
        self.booking_command_repo = booking_command_repo
        self.batch_size = batch_size
        self.closer = CancelOrExpireBookingUseCase(booking_command_repo=booking_command_repo)
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def expire_stale_bookings(self, *, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        expired = 0

        with self.tracer.start_as_current_span('use_case.expire_stale_bookings'):
            while True:
                stale = await self.booking_command_repo.list_expired_pending(
                    now=now, limit=self.batch_size
                )
                if not stale:
                    break

                progressed = False
                for booking in stale:
                    try:
                        await self.closer.close(
                            booking=booking, reason=BookingStatus.EXPIRED, now=now
                        )
                    except InvalidStateTransitionError:
                        # Confirmed or cancelled after it was listed
                        continue
                    expired += 1
                    progressed = True

                if not progressed or len(stale) < self.batch_size:
                    break

        if expired:
            Logger.base.info(f'⏰ [EXPIRY] Expired {expired} stale pending booking(s)')
        return expired
