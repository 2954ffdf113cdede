from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus
from eventdesk.service.booking.domain.enum.ticket_status import TicketStatus


@attrs.define
class Ticket:
    id: UUID
    booking_id: UUID
    event_id: UUID
    attendee_name: str
    attendee_email: str
    attendee_phone: Optional[str] = None
    status: TicketStatus = attrs.field(default=TicketStatus.ACTIVE, converter=TicketStatus)
    issued_at: Optional[datetime] = None


def issue_tickets(booking: Booking, *, now: Optional[datetime] = None) -> List[Ticket]:
    """One active ticket per seat of a confirmed booking."""
    if booking.status != BookingStatus.CONFIRMED:
        raise DomainError('Tickets can only be issued for confirmed bookings')

    issued_at = now or datetime.now(timezone.utc)
    info = booking.attendee_info
    return [
        Ticket(
            id=uuid7(),
            booking_id=booking.id,
            event_id=booking.event_id,
            attendee_name=info.name_at(index),
            attendee_email=info.email_at(index, booking.user_email),
            attendee_phone=info.phone_at(index),
            status=TicketStatus.ACTIVE,
            issued_at=issued_at,
        )
        for index in range(booking.quantity)
    ]
