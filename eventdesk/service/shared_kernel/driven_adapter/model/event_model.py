from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from eventdesk.platform.database.orm_db_setting import Base
from eventdesk.platform.database.time_utils import as_utc
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class EventModel(Base):
    __tablename__ = 'event'
    __table_args__ = (
        CheckConstraint(
            'available_seats >= 0 AND available_seats <= total_capacity',
            name='ck_event_available_seats_bounds',
        ),
        CheckConstraint('total_capacity > 0', name='ck_event_total_capacity_positive'),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, default='', index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    short_description: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    venue_address: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    city: Mapped[str] = mapped_column(String(120), nullable=False, default='')
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    booking_start_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    booking_end_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default='INR')
    max_tickets_per_user: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='draft')
    organizer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


def event_model_to_entity(model: EventModel) -> Event:
    return Event(
        id=model.id,
        slug=model.slug,
        title=model.title,
        short_description=model.short_description,
        description=model.description,
        venue_name=model.venue_name,
        venue_address=model.venue_address,
        city=model.city,
        latitude=model.latitude,
        longitude=model.longitude,
        start_date=as_utc(model.start_date),  # type: ignore[arg-type]
        end_date=as_utc(model.end_date),  # type: ignore[arg-type]
        booking_start_date=as_utc(model.booking_start_date),
        booking_end_date=as_utc(model.booking_end_date),
        total_capacity=model.total_capacity,
        available_seats=model.available_seats,
        base_price=model.base_price,
        currency=model.currency,
        max_tickets_per_user=model.max_tickets_per_user,
        is_published=model.is_published,
        status=model.status,
        organizer_id=model.organizer_id,
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def event_entity_to_model(event: Event) -> EventModel:
    return EventModel(
        id=event.id,
        slug=event.slug,
        title=event.title,
        short_description=event.short_description,
        description=event.description,
        venue_name=event.venue_name,
        venue_address=event.venue_address,
        city=event.city,
        latitude=event.latitude,
        longitude=event.longitude,
        start_date=as_utc(event.start_date),
        end_date=as_utc(event.end_date),
        booking_start_date=as_utc(event.booking_start_date),
        booking_end_date=as_utc(event.booking_end_date),
        total_capacity=event.total_capacity,
        available_seats=event.available_seats,
        base_price=event.base_price,
        currency=event.currency,
        max_tickets_per_user=event.max_tickets_per_user,
        is_published=event.is_published,
        status=str(event.status),
        organizer_id=event.organizer_id,
    )
