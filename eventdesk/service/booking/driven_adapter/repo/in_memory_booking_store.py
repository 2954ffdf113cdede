"""
In-memory storage for a single-process deployment and for tests

Every seat mutation for an event runs under that event's asyncio.Lock, so
check-and-decrement (seats left and the user's ticket limit) and
check-and-restore are atomic with respect to other coroutines in the same
event loop.
"""

import asyncio
from collections import defaultdict
from datetime import datetime
from typing import Dict, List
from uuid import UUID

import attrs

from eventdesk.platform.exception.exceptions import ConflictError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.app.interface.i_event_repo import IEventRepo
from eventdesk.service.booking.domain.booking_errors import PerUserLimitExceededError
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus
from eventdesk.service.proximity.app.interface.i_event_location_query_repo import (
    IEventLocationQueryRepo,
)
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


class InMemoryBookingStore(IEventRepo, IBookingCommandRepo, IEventLocationQueryRepo):
    def __init__(self) -> None:
        self._events: Dict[UUID, Event] = {}
        self._bookings: Dict[str, Booking] = {}
        self._tickets: Dict[UUID, List[Ticket]] = {}
        self._locks: Dict[UUID, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ========== Event ==========

    async def add_event(self, event: Event) -> Event:
        self._events[event.id] = event
        return event

    async def get_by_id(self, *, event_id: UUID) -> Event | None:
        return self._events.get(event_id)

    async def save_publication_state(self, *, event: Event) -> Event:
        async with self._locks[event.id]:
            current = self._events.get(event.id)
            if current is None:
                raise ConflictError(f'Event {event.id} no longer exists')
            # Seat counters may have moved since `event` was loaded
            updated = attrs.evolve(
                current,
                is_published=event.is_published,
                status=event.status,
                updated_at=event.updated_at,
            )
            self._events[event.id] = updated
            return updated

    async def list_discoverable_events(self, *, ends_after: datetime) -> List[Event]:
        return [
            event
            for event in self._events.values()
            if event.is_discoverable and event.end_date >= ends_after
        ]

    # ========== Booking ==========

    async def reference_exists(self, *, booking_reference: str) -> bool:
        return booking_reference in self._bookings

    async def get_by_reference(self, *, booking_reference: str) -> Booking | None:
        return self._bookings.get(booking_reference)

    async def sum_active_quantity_for_user(self, *, event_id: UUID, user_id: str) -> int:
        return self._active_quantity(event_id=event_id, user_id=user_id)

    def _active_quantity(self, *, event_id: UUID, user_id: str) -> int:
        return sum(
            booking.quantity
            for booking in self._bookings.values()
            if booking.event_id == event_id and booking.user_id == user_id and booking.is_active
        )

    @Logger.io
    async def hold_seats_and_create_booking(
        self, *, booking: Booking, max_tickets_per_user: int
    ) -> Booking | None:
        async with self._locks[booking.event_id]:
            event = self._events.get(booking.event_id)
            if event is None or event.available_seats < booking.quantity:
                return None

            existing = self._active_quantity(event_id=booking.event_id, user_id=booking.user_id)
            if existing + booking.quantity > max_tickets_per_user:
                raise PerUserLimitExceededError(
                    requested=booking.quantity, existing=existing, limit=max_tickets_per_user
                )
            if booking.booking_reference in self._bookings:
                raise ConflictError(f'Booking reference {booking.booking_reference} already used')

            self._events[event.id] = attrs.evolve(
                event, available_seats=event.available_seats - booking.quantity
            )
            self._bookings[booking.booking_reference] = booking
            return booking

    @Logger.io
    async def confirm_booking_and_issue_tickets(
        self, *, booking: Booking, tickets: List[Ticket]
    ) -> Booking | None:
        async with self._locks[booking.event_id]:
            current = self._bookings.get(booking.booking_reference)
            if current is None or current.status != BookingStatus.PENDING:
                return None
            self._bookings[booking.booking_reference] = booking
            self._tickets[booking.id] = list(tickets)
            return booking

    @Logger.io
    async def release_seats_and_close_booking(self, *, booking: Booking) -> Booking | None:
        async with self._locks[booking.event_id]:
            current = self._bookings.get(booking.booking_reference)
            if current is None or current.status != BookingStatus.PENDING:
                return None

            event = self._events.get(booking.event_id)
            if event is not None:
                restored = min(event.available_seats + current.quantity, event.total_capacity)
                self._events[event.id] = attrs.evolve(event, available_seats=restored)
            self._bookings[booking.booking_reference] = booking
            return booking

    async def list_tickets(self, *, booking_id: UUID) -> List[Ticket]:
        return list(self._tickets.get(booking_id, []))

    async def list_expired_pending(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        stale = [
            booking
            for booking in self._bookings.values()
            if booking.is_hold_expired(now)
        ]
        stale.sort(key=lambda booking: booking.expires_at)  # type: ignore[arg-type, return-value]
        return stale[:limit]
