from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

import attrs

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.shared_kernel.domain.enum.event_status import EventStatus


def _check_seats(instance: 'Event', attribute: attrs.Attribute, value: int) -> None:
    if value < 0 or value > instance.total_capacity:
        raise DomainError(
            f'available_seats must be between 0 and total_capacity ({instance.total_capacity})'
        )


def _check_capacity(instance: 'Event', attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise DomainError('total_capacity must be greater than 0')


def _check_dates(instance: 'Event', attribute: attrs.Attribute, value: datetime) -> None:
    if value <= instance.start_date:
        raise DomainError('end_date must be after start_date')


def _check_price(instance: 'Event', attribute: attrs.Attribute, value: Decimal) -> None:
    if value < 0:
        raise DomainError('base_price cannot be negative')


def _check_max_tickets(instance: 'Event', attribute: attrs.Attribute, value: Any) -> None:
    if value is not None and value < 1:
        raise DomainError('max_tickets_per_user must be at least 1')


def _check_longitude(instance: 'Event', attribute: attrs.Attribute, value: Any) -> None:
    if (value is None) != (instance.latitude is None):
        raise DomainError('latitude and longitude must be provided together')
    if instance.latitude is not None and not -90 <= instance.latitude <= 90:
        raise DomainError('latitude must be between -90 and 90')
    if value is not None and not -180 <= value <= 180:
        raise DomainError('longitude must be between -180 and 180')


@attrs.define
class Event:
    """
    Event as seen by booking and proximity search.

    Seats are tracked as a counter: `available_seats` is decremented by
    pending bookings and restored when a pending booking is cancelled or expires.
    """

    id: UUID
    title: str
    start_date: datetime
    end_date: datetime = attrs.field(validator=_check_dates)
    total_capacity: int = attrs.field(validator=_check_capacity)
    available_seats: int = attrs.field(validator=_check_seats)
    base_price: Decimal = attrs.field(converter=Decimal, validator=_check_price)
    currency: str = 'INR'
    slug: str = ''
    short_description: str = ''
    description: str = ''
    venue_name: str = ''
    venue_address: str = ''
    city: str = ''
    latitude: Optional[float] = None
    longitude: Optional[float] = attrs.field(default=None, validator=_check_longitude)
    booking_start_date: Optional[datetime] = None
    booking_end_date: Optional[datetime] = None
    max_tickets_per_user: Optional[int] = attrs.field(default=None, validator=_check_max_tickets)
    is_published: bool = False
    status: EventStatus = attrs.field(default=EventStatus.DRAFT, converter=EventStatus)
    organizer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_discoverable(self) -> bool:
        return self.is_published and self.status == EventStatus.PUBLISHED

    @property
    def is_geotagged(self) -> bool:
        # 0.0 is a valid coordinate, only None means "no location"
        return self.latitude is not None and self.longitude is not None

    def ticket_limit(self, default: int) -> int:
        return self.max_tickets_per_user or default

    def booking_window_open(self, now: datetime) -> bool:
        opens_at = self.booking_start_date
        closes_at = self.booking_end_date or self.start_date
        if opens_at is not None and now < opens_at:
            return False
        return now < closes_at

    def publication_blockers(self) -> List[str]:
        reasons: List[str] = []
        if self.is_published:
            reasons.append('Event is already published')
        if not self.title.strip():
            reasons.append('Title is required')
        if not self.short_description.strip():
            reasons.append('Short description is required')
        if not self.description.strip():
            reasons.append('Description is required')
        if not self.venue_name.strip():
            reasons.append('Venue name is required')
        if not self.venue_address.strip():
            reasons.append('Venue address is required')
        return reasons

    @Logger.io
    def publish(self) -> 'Event':
        if reasons := self.publication_blockers():
            raise DomainError(f'Event cannot be published: {"; ".join(reasons)}')
        return attrs.evolve(
            self,
            is_published=True,
            status=EventStatus.PUBLISHED,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def unpublish(self) -> 'Event':
        if not self.is_published:
            raise DomainError('Event is not published')
        return attrs.evolve(
            self,
            is_published=False,
            status=EventStatus.DRAFT,
            updated_at=datetime.now(timezone.utc),
        )
