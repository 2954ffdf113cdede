from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.domain.booking_errors import InvalidStateTransitionError
from eventdesk.service.booking.domain.enum.booking_status import (
    ACTIVE_BOOKING_STATUSES,
    ALLOWED_TRANSITIONS,
    BookingStatus,
)
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo
from eventdesk.service.booking.domain.value_object.price_breakdown import PriceBreakdown


@attrs.define
class Booking:
    id: UUID
    booking_reference: str
    event_id: UUID
    user_id: str
    quantity: int
    unit_price: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    currency: str
    attendee_info: AttendeeInfo = attrs.field(factory=AttendeeInfo)
    user_email: Optional[str] = None
    status: BookingStatus = attrs.field(default=BookingStatus.PENDING, converter=BookingStatus)
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        booking_reference: str,
        event_id: UUID,
        user_id: str,
        user_email: Optional[str],
        quantity: int,
        attendee_info: AttendeeInfo,
        price: PriceBreakdown,
        hold_minutes: int,
        now: Optional[datetime] = None,
    ) -> 'Booking':
        if quantity < 1:
            raise DomainError('quantity must be at least 1')
        if price.quantity != quantity:
            raise DomainError('price breakdown does not match the requested quantity')
        attendee_info.validate_for(quantity)

        now = now or datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            booking_reference=booking_reference,
            event_id=event_id,
            user_id=user_id,
            user_email=user_email,
            quantity=quantity,
            unit_price=price.unit_price,
            platform_fee=price.platform_fee,
            total_amount=price.total_amount,
            currency=price.currency,
            attendee_info=attendee_info,
            status=BookingStatus.PENDING,
            expires_at=now + timedelta(minutes=hold_minutes),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES

    @property
    def subtotal(self) -> Decimal:
        return self.total_amount - self.platform_fee

    def is_hold_expired(self, now: datetime) -> bool:
        return (
            self.status == BookingStatus.PENDING
            and self.expires_at is not None
            and now >= self.expires_at
        )

    def _ensure_transition(self, target: BookingStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateTransitionError(
                f'Booking {self.booking_reference} cannot move from {self.status} to {target}'
            )

    @Logger.io
    def confirm(self, *, now: Optional[datetime] = None) -> 'Booking':
        self._ensure_transition(BookingStatus.CONFIRMED)
        now = now or datetime.now(timezone.utc)
        return attrs.evolve(self, status=BookingStatus.CONFIRMED, confirmed_at=now, updated_at=now)

    @Logger.io
    def close(self, *, status: BookingStatus, now: Optional[datetime] = None) -> 'Booking':
        """
        Close a pending booking as cancelled or expired

        Raises:
            DomainError: When status is not a closing status
            InvalidStateTransitionError: When the booking is no longer pending
        """
        if status not in (BookingStatus.CANCELLED, BookingStatus.EXPIRED):
            raise DomainError(f'{status} is not a valid closing status')
        self._ensure_transition(status)
        now = now or datetime.now(timezone.utc)
        return attrs.evolve(self, status=status, cancelled_at=now, updated_at=now)
