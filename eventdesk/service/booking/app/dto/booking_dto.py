from typing import List

import attrs

from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket


@attrs.frozen
class BookingWithTickets:
    booking: Booking
    tickets: List[Ticket] = attrs.field(factory=list)
