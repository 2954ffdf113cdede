from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from eventdesk.platform.database.orm_db_setting import Base
from eventdesk.platform.database.time_utils import as_utc
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo

# Registers the event table on Base.metadata for the foreign key below
from eventdesk.service.shared_kernel.driven_adapter.model.event_model import (  # noqa: F401
    EventModel,
)


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (CheckConstraint('quantity > 0', name='ck_booking_quantity_positive'),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    booking_reference: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    event_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('event.id', ondelete='CASCADE'), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending', index=True)
    attendee_info: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


def booking_model_to_entity(model: BookingModel) -> Booking:
    info = model.attendee_info or {}
    return Booking(
        id=model.id,
        booking_reference=model.booking_reference,
        event_id=model.event_id,
        user_id=model.user_id,
        user_email=model.user_email,
        quantity=model.quantity,
        unit_price=model.unit_price,
        platform_fee=model.platform_fee,
        total_amount=model.total_amount,
        currency=model.currency,
        status=model.status,
        attendee_info=AttendeeInfo(
            names=info.get('names', []),
            emails=info.get('emails', []),
            phones=info.get('phones', []),
        ),
        expires_at=as_utc(model.expires_at),
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
        confirmed_at=as_utc(model.confirmed_at),
        cancelled_at=as_utc(model.cancelled_at),
    )


def booking_entity_to_model(booking: Booking) -> BookingModel:
    now = datetime.now(timezone.utc)
    return BookingModel(
        id=booking.id,
        booking_reference=booking.booking_reference,
        event_id=booking.event_id,
        user_id=booking.user_id,
        user_email=booking.user_email,
        quantity=booking.quantity,
        unit_price=booking.unit_price,
        platform_fee=booking.platform_fee,
        total_amount=booking.total_amount,
        currency=booking.currency,
        status=str(booking.status),
        attendee_info=booking.attendee_info.to_dict(),
        expires_at=as_utc(booking.expires_at),
        created_at=as_utc(booking.created_at or now),
        updated_at=as_utc(booking.updated_at or now),
    )
