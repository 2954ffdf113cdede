from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from eventdesk.platform.database.orm_db_setting import Base
from eventdesk.platform.database.time_utils import as_utc
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket


class TicketModel(Base):
    __tablename__ = 'ticket'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    booking_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    event_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    attendee_name: Mapped[str] = mapped_column(String(255), nullable=False)
    attendee_email: Mapped[str] = mapped_column(String(320), nullable=False, default='')
    attendee_phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    issued_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


def ticket_model_to_entity(model: TicketModel) -> Ticket:
    return Ticket(
        id=model.id,
        booking_id=model.booking_id,
        event_id=model.event_id,
        attendee_name=model.attendee_name,
        attendee_email=model.attendee_email,
        attendee_phone=model.attendee_phone,
        status=model.status,
        issued_at=as_utc(model.issued_at),
    )


def ticket_entity_to_model(ticket: Ticket) -> TicketModel:
    return TicketModel(
        id=ticket.id,
        booking_id=ticket.booking_id,
        event_id=ticket.event_id,
        attendee_name=ticket.attendee_name,
        attendee_email=ticket.attendee_email,
        attendee_phone=ticket.attendee_phone,
        status=str(ticket.status),
        issued_at=as_utc(ticket.issued_at),
    )
