"""
Booking Command Repository Implementation (SQLAlchemy async)

Seat accounting relies on conditional UPDATEs executed in the same
transaction as the booking write:
- hold:    SELECT ... FROM event WHERE id = :event_id FOR UPDATE
           sum the user's active seats, reject past the per-user limit
           UPDATE event SET available_seats = available_seats - q
           WHERE id = :event_id AND available_seats >= q RETURNING ...
- confirm: UPDATE booking SET status = 'confirmed' WHERE ... AND status = 'pending'
- release: UPDATE booking SET status = :closed WHERE ... AND status = 'pending'
           then restore seats capped at total_capacity
A zero-row UPDATE means the condition failed and nothing is written.
"""

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Callable, List
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.platform.database.time_utils import as_utc
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from eventdesk.service.booking.domain.booking_errors import PerUserLimitExceededError
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket
from eventdesk.service.booking.domain.enum.booking_status import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
)
from eventdesk.service.booking.driven_adapter.model.booking_model import (
    BookingModel,
    booking_entity_to_model,
    booking_model_to_entity,
)
from eventdesk.service.booking.driven_adapter.model.ticket_model import (
    TicketModel,
    ticket_entity_to_model,
    ticket_model_to_entity,
)
from eventdesk.service.shared_kernel.driven_adapter.model.event_model import EventModel


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(
        self, session_factory: Callable[..., AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    async def reference_exists(self, *, booking_reference: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel.id).where(BookingModel.booking_reference == booking_reference)
            )
            return result.first() is not None

    @Logger.io
    async def get_by_reference(self, *, booking_reference: str) -> Booking | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.booking_reference == booking_reference)
            )
            model = result.scalar_one_or_none()
            return booking_model_to_entity(model) if model else None

    async def sum_active_quantity_for_user(self, *, event_id: UUID, user_id: str) -> int:
        async with self.session_factory() as session:
            return await self._active_quantity(session, event_id=event_id, user_id=user_id)

    @staticmethod
    async def _active_quantity(session: AsyncSession, *, event_id: UUID, user_id: str) -> int:
        result = await session.execute(
            select(func.coalesce(func.sum(BookingModel.quantity), 0)).where(
                BookingModel.event_id == event_id,
                BookingModel.user_id == user_id,
                BookingModel.status.in_([str(s) for s in ACTIVE_BOOKING_STATUSES]),
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def hold_seats_and_create_booking(
        self, *, booking: Booking, max_tickets_per_user: int
    ) -> Booking | None:
        async with self.session_factory() as session:
            async with session.begin():
                # Row lock serializes holds on the event until commit
                locked = await session.execute(
                    select(EventModel.available_seats)
                    .where(EventModel.id == booking.event_id)
                    .with_for_update()
                )
                available = locked.scalar_one_or_none()
                if available is None or available < booking.quantity:
                    return None

                existing = await self._active_quantity(
                    session, event_id=booking.event_id, user_id=booking.user_id
                )
                if existing + booking.quantity > max_tickets_per_user:
                    raise PerUserLimitExceededError(
                        requested=booking.quantity, existing=existing, limit=max_tickets_per_user
                    )

                result = await session.execute(
                    update(EventModel)
                    .where(
                        EventModel.id == booking.event_id,
                        EventModel.available_seats >= booking.quantity,
                    )
                    .values(available_seats=EventModel.available_seats - booking.quantity)
                    .returning(EventModel.available_seats)
                    .execution_options(synchronize_session=False)
                )
                remaining = result.scalar_one_or_none()
                if remaining is None:
                    return None

                session.add(booking_entity_to_model(booking))

        Logger.base.info(
            f'💺 [DB] Held {booking.quantity} seat(s) for {booking.booking_reference}, '
            f'{remaining} left'
        )
        return booking

    @Logger.io
    async def confirm_booking_and_issue_tickets(
        self, *, booking: Booking, tickets: List[Ticket]
    ) -> Booking | None:
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(BookingModel)
                    .where(
                        BookingModel.booking_reference == booking.booking_reference,
                        BookingModel.status == str(BookingStatus.PENDING),
                    )
                    .values(
                        status=str(booking.status),
                        confirmed_at=as_utc(booking.confirmed_at),
                        updated_at=as_utc(booking.updated_at),
                    )
                    .returning(BookingModel.id)
                    .execution_options(synchronize_session=False)
                )
                if result.scalar_one_or_none() is None:
                    return None

                session.add_all([ticket_entity_to_model(ticket) for ticket in tickets])

        return booking

    @Logger.io
    async def release_seats_and_close_booking(self, *, booking: Booking) -> Booking | None:
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(BookingModel)
                    .where(
                        BookingModel.booking_reference == booking.booking_reference,
                        BookingModel.status == str(BookingStatus.PENDING),
                    )
                    .values(
                        status=str(booking.status),
                        cancelled_at=as_utc(booking.cancelled_at),
                        updated_at=as_utc(booking.updated_at),
                    )
                    .returning(BookingModel.quantity)
                    .execution_options(synchronize_session=False)
                )
                quantity = result.scalar_one_or_none()
                if quantity is None:
                    return None

                restored = EventModel.available_seats + quantity
                await session.execute(
                    update(EventModel)
                    .where(EventModel.id == booking.event_id)
                    .values(
                        available_seats=case(
                            (restored > EventModel.total_capacity, EventModel.total_capacity),
                            else_=restored,
                        )
                    )
                    .execution_options(synchronize_session=False)
                )

        return booking

    async def list_tickets(self, *, booking_id: UUID) -> List[Ticket]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.booking_id == booking_id)
                .order_by(TicketModel.id)
            )
            return [ticket_model_to_entity(model) for model in result.scalars().all()]

    async def list_expired_pending(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(BookingModel)
                .where(
                    BookingModel.status == str(BookingStatus.PENDING),
                    BookingModel.expires_at <= as_utc(now),
                )
                .order_by(BookingModel.expires_at)
                .limit(limit)
            )
            return [booking_model_to_entity(model) for model in result.scalars().all()]
