from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from eventdesk.service.booking.app.dto.booking_dto import BookingWithTickets
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket


class AttendeeInfoSchema(BaseModel):
    names: List[str] = []
    emails: List[str] = []
    phones: List[str] = []


class BookingCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'event_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'user_id': 'user-42',
                'user_email': 'asha@example.com',
                'quantity': 2,
                'attendee_info': {
                    'names': ['Asha Rao', 'Vikram Rao'],
                    'emails': ['asha@example.com', ''],
                    'phones': [],
                },
            }
        },
    }

    event_id: UUID
    user_id: str = Field(min_length=1, max_length=64)
    user_email: Optional[str] = None
    quantity: int = Field(ge=1)
    attendee_info: AttendeeInfoSchema = AttendeeInfoSchema()

    @model_validator(mode='after')
    def default_attendees(self) -> 'BookingCreateRequest':
        # Booking for yourself alone needs no attendee form
        info = self.attendee_info
        if not info.names and not info.emails and self.quantity == 1:
            self.attendee_info = AttendeeInfoSchema(names=[''], emails=[''])
        return self


class CancelBookingRequest(BaseModel):
    reason: Literal['cancelled', 'expired'] = 'cancelled'


class TicketResponse(BaseModel):
    id: UUID
    attendee_name: str
    attendee_email: str
    attendee_phone: Optional[str] = None
    status: str
    issued_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            attendee_name=ticket.attendee_name,
            attendee_email=ticket.attendee_email,
            attendee_phone=ticket.attendee_phone,
            status=str(ticket.status),
            issued_at=ticket.issued_at,
        )


class BookingResponse(BaseModel):
    id: UUID  # UUID7
    booking_reference: str
    event_id: UUID
    user_id: str
    quantity: int
    unit_price: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    currency: str
    status: str
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            booking_reference=booking.booking_reference,
            event_id=booking.event_id,
            user_id=booking.user_id,
            quantity=booking.quantity,
            unit_price=booking.unit_price,
            platform_fee=booking.platform_fee,
            total_amount=booking.total_amount,
            currency=booking.currency,
            status=str(booking.status),
            expires_at=booking.expires_at,
            created_at=booking.created_at,
            confirmed_at=booking.confirmed_at,
            cancelled_at=booking.cancelled_at,
        )


class BookingDetailResponse(BookingResponse):
    tickets: List[TicketResponse] = []

    @classmethod
    def from_dto(cls, result: BookingWithTickets) -> 'BookingDetailResponse':
        return cls(
            **BookingResponse.from_entity(result.booking).model_dump(),
            tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
        )
