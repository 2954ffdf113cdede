from datetime import datetime, timezone
import time
from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from eventdesk.platform.config.core_setting import Settings
from eventdesk.platform.config.di import Container
from eventdesk.platform.exception.exceptions import ConflictError, CustomBaseError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.platform.metrics.booking_metrics import metrics
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.app.interface.i_event_repo import IEventRepo
from eventdesk.service.booking.domain.booking_errors import (
    CapacityExceededError,
    EventNotFoundError,
    PerUserLimitExceededError,
)
from eventdesk.service.booking.domain.booking_policy import (
    compute_price,
    generate_booking_reference,
    validate_booking_request,
)
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo


class CreatePendingBookingUseCase:
    """
    Hold seats for a user and create a pending booking

    Flow:
    1. Load event, sum the user's active seats for it
    2. Validate request (published, window, capacity, per-user limit)
    3. Price the booking and pick an unused booking reference
    4. Atomically re-check the per-user limit, decrement seats + insert booking
       (conditional on seats left)

    The pending booking holds its seats until it is confirmed, cancelled, or
    its hold expires.
    """

    def __init__(
        self,
        *,
        event_repo: IEventRepo,
        booking_command_repo: IBookingCommandRepo,
        settings: Settings,
    ) -> None:
        self.event_repo = event_repo
        self.booking_command_repo = booking_command_repo
        self.settings = settings
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        event_repo: IEventRepo = Depends(Provide[Container.event_repo]),
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            event_repo=event_repo, booking_command_repo=booking_command_repo, settings=settings
        )

    @Logger.io
    async def create_pending_booking(
        self,
        *,
        event_id: UUID,
        user_id: str,
        user_email: Optional[str],
        quantity: int,
        attendee_info: AttendeeInfo,
        now: Optional[datetime] = None,
    ) -> Booking:
        started = time.perf_counter()
        now = now or datetime.now(timezone.utc)

        with self.tracer.start_as_current_span(
            'use_case.create_pending_booking',
            attributes={'event.id': str(event_id), 'booking.quantity': quantity},
        ):
            try:
                booking = await self._create(
                    event_id=event_id,
                    user_id=user_id,
                    user_email=user_email,
                    quantity=quantity,
                    attendee_info=attendee_info,
                    now=now,
                )
            except CapacityExceededError:
                self._record('capacity_exceeded', started)
                raise
            except PerUserLimitExceededError:
                self._record('limit_exceeded', started)
                raise
            except CustomBaseError:
                self._record('rejected', started)
                raise

            self._record('created', started)
            metrics.record_seats_held(quantity=booking.quantity)
            Logger.base.info(
                f'📝 [BOOKING] Pending {booking.booking_reference}: '
                f'{booking.quantity} seat(s) of event {event_id} held until {booking.expires_at}'
            )
            return booking

    async def _create(
        self,
        *,
        event_id: UUID,
        user_id: str,
        user_email: Optional[str],
        quantity: int,
        attendee_info: AttendeeInfo,
        now: datetime,
    ) -> Booking:
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise EventNotFoundError(event_id)

        # Early rejection only; the hold re-checks both limits atomically
        existing_quantity = await self.booking_command_repo.sum_active_quantity_for_user(
            event_id=event_id, user_id=user_id
        )
        validate_booking_request(
            event,
            quantity,
            existing_quantity,
            now=now,
            default_max_tickets_per_user=self.settings.DEFAULT_MAX_TICKETS_PER_USER,
        )

        price = compute_price(
            event.base_price, quantity, self.settings.PLATFORM_FEE_RATE, event.currency
        )
        booking = Booking.create(
            booking_reference=await self._unused_reference(),
            event_id=event_id,
            user_id=user_id,
            user_email=user_email,
            quantity=quantity,
            attendee_info=attendee_info,
            price=price,
            hold_minutes=self.settings.BOOKING_HOLD_MINUTES,
            now=now,
        )

        stored = await self.booking_command_repo.hold_seats_and_create_booking(
            booking=booking,
            max_tickets_per_user=event.ticket_limit(self.settings.DEFAULT_MAX_TICKETS_PER_USER),
        )
        if stored is None:
            # Another booking took the seats between validation and the conditional decrement
            latest = await self.event_repo.get_by_id(event_id=event_id)
            raise CapacityExceededError(
                requested=quantity, available=latest.available_seats if latest else 0
            )
        return stored

    async def _unused_reference(self) -> str:
        for _ in range(self.settings.BOOKING_REFERENCE_MAX_ATTEMPTS):
            reference = generate_booking_reference(
                self.settings.BOOKING_REFERENCE_PREFIX, self.settings.BOOKING_REFERENCE_LENGTH
            )
            if not await self.booking_command_repo.reference_exists(booking_reference=reference):
                return reference
        raise ConflictError('Could not allocate a unique booking reference')

    @staticmethod
    def _record(result: str, started: float) -> None:
        metrics.record_booking_request(result=result, duration=time.perf_counter() - started)
