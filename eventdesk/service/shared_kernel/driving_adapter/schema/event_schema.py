from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class EventResponse(BaseModel):
    id: UUID
    slug: str
    title: str
    short_description: str
    venue_name: str
    venue_address: str
    city: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    start_date: datetime
    end_date: datetime
    total_capacity: int
    available_seats: int
    base_price: Decimal
    currency: str
    is_published: bool
    status: str

    @classmethod
    def from_entity(cls, event: Event) -> 'EventResponse':
        return cls(
            id=event.id,
            slug=event.slug,
            title=event.title,
            short_description=event.short_description,
            venue_name=event.venue_name,
            venue_address=event.venue_address,
            city=event.city,
            latitude=event.latitude,
            longitude=event.longitude,
            start_date=event.start_date,
            end_date=event.end_date,
            total_capacity=event.total_capacity,
            available_seats=event.available_seats,
            base_price=event.base_price,
            currency=event.currency,
            is_published=event.is_published,
            status=str(event.status),
        )
