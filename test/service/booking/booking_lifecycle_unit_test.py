"""
Booking lifecycle against the in-memory store

End-to-end seat accounting through the real use cases:
- pending bookings hold seats, cancel / expire give them back exactly once
- confirm issues one ticket per seat and is idempotent
- concurrent requests never oversell or pass the per-user limit
"""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from eventdesk.platform.config.core_setting import Settings
from eventdesk.service.booking.app.command.cancel_or_expire_booking_use_case import (
    CancelOrExpireBookingUseCase,
)
from eventdesk.service.booking.app.command.confirm_booking_use_case import ConfirmBookingUseCase
from eventdesk.service.booking.app.command.create_pending_booking_use_case import (
    CreatePendingBookingUseCase,
)
from eventdesk.service.booking.app.command.expire_stale_bookings_use_case import (
    ExpireStaleBookingsUseCase,
)
from eventdesk.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from eventdesk.service.booking.domain.booking_errors import (
    BookingExpiredError,
    BookingNotFoundError,
    CapacityExceededError,
    InvalidStateTransitionError,
    PerUserLimitExceededError,
)
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo
from eventdesk.service.booking.driven_adapter.repo.in_memory_booking_store import (
    InMemoryBookingStore,
)
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event
from test.shared.utils import build_event


class BookingFlow:
    """The booking use cases wired to one store"""

    def __init__(self, store: InMemoryBookingStore, settings: Settings) -> None:
        self.store = store
        self.create = CreatePendingBookingUseCase(
            event_repo=store, booking_command_repo=store, settings=settings
        )
        self.confirm = ConfirmBookingUseCase(booking_command_repo=store)
        self.cancel = CancelOrExpireBookingUseCase(booking_command_repo=store)
        self.get = GetBookingUseCase(booking_command_repo=store)
        self.sweep = ExpireStaleBookingsUseCase(booking_command_repo=store, batch_size=2)

    async def hold(
        self, event: Event, quantity: int, *, user_id: str = 'user-1', now: datetime | None = None
    ) -> Booking:
        return await self.create.create_pending_booking(
            event_id=event.id,
            user_id=user_id,
            user_email=f'{user_id}@example.com',
            quantity=quantity,
            attendee_info=AttendeeInfo(names=[''] * quantity, emails=[''] * quantity),
            now=now,
        )

    async def seats_left(self, event: Event) -> int:
        current = await self.store.get_by_id(event_id=event.id)
        assert current is not None
        return current.available_seats


@pytest.fixture
def flow(store: InMemoryBookingStore, settings: Settings) -> BookingFlow:
    return BookingFlow(store, settings)


@pytest.fixture
async def event(store: InMemoryBookingStore) -> Event:
    return await store.add_event(
        build_event(total_capacity=10, available_seats=10, max_tickets_per_user=10)
    )


@pytest.mark.unit
class TestSeatAccounting:
    @pytest.mark.asyncio
    async def test_confirmed_seats_stay_taken(self, flow: BookingFlow, event: Event) -> None:
        # Arrange
        booking = await flow.hold(event, 7)

        # Act
        result = await flow.confirm.confirm_booking(booking_reference=booking.booking_reference)

        # Assert
        assert result.booking.status == BookingStatus.CONFIRMED
        assert len(result.tickets) == 7
        assert all(ticket.attendee_name == 'Guest' for ticket in result.tickets)
        assert all(ticket.attendee_email == 'user-1@example.com' for ticket in result.tickets)
        assert await flow.seats_left(event) == 3

        with pytest.raises(CapacityExceededError):
            await flow.hold(event, 5, user_id='user-2')
        assert await flow.seats_left(event) == 3

    @pytest.mark.asyncio
    async def test_cancel_restores_seats_once(self, flow: BookingFlow, event: Event) -> None:
        booking = await flow.hold(event, 4)
        assert await flow.seats_left(event) == 6

        cancelled = await flow.cancel.cancel_or_expire_booking(
            booking_reference=booking.booking_reference
        )
        again = await flow.cancel.cancel_or_expire_booking(
            booking_reference=booking.booking_reference
        )

        assert cancelled.status == BookingStatus.CANCELLED
        assert again.status == BookingStatus.CANCELLED
        assert await flow.seats_left(event) == 10

    @pytest.mark.asyncio
    async def test_cancelled_booking_cannot_be_expired(
        self, flow: BookingFlow, event: Event
    ) -> None:
        booking = await flow.hold(event, 1)
        await flow.cancel.cancel_or_expire_booking(booking_reference=booking.booking_reference)

        with pytest.raises(InvalidStateTransitionError):
            await flow.cancel.cancel_or_expire_booking(
                booking_reference=booking.booking_reference, reason=BookingStatus.EXPIRED
            )
        assert await flow.seats_left(event) == 10

    @pytest.mark.asyncio
    async def test_confirmed_booking_cannot_be_cancelled(
        self, flow: BookingFlow, event: Event
    ) -> None:
        booking = await flow.hold(event, 2)
        await flow.confirm.confirm_booking(booking_reference=booking.booking_reference)

        with pytest.raises(InvalidStateTransitionError):
            await flow.cancel.cancel_or_expire_booking(booking_reference=booking.booking_reference)
        assert await flow.seats_left(event) == 8

    @pytest.mark.asyncio
    async def test_unknown_reference(self, flow: BookingFlow) -> None:
        with pytest.raises(BookingNotFoundError):
            await flow.cancel.cancel_or_expire_booking(booking_reference='BKMISSING1')

    @pytest.mark.asyncio
    async def test_per_user_limit_ignores_closed_bookings(
        self, store: InMemoryBookingStore, flow: BookingFlow
    ) -> None:
        event = await store.add_event(
            build_event(total_capacity=20, available_seats=20, max_tickets_per_user=4)
        )
        first = await flow.hold(event, 3)

        with pytest.raises(PerUserLimitExceededError):
            await flow.hold(event, 2)

        await flow.cancel.cancel_or_expire_booking(booking_reference=first.booking_reference)
        second = await flow.hold(event, 4)

        assert second.quantity == 4
        assert await flow.seats_left(event) == 16


@pytest.mark.unit
class TestConfirm:
    @pytest.mark.asyncio
    async def test_confirm_twice_returns_same_tickets(
        self, flow: BookingFlow, event: Event
    ) -> None:
        booking = await flow.hold(event, 3)

        first = await flow.confirm.confirm_booking(booking_reference=booking.booking_reference)
        second = await flow.confirm.confirm_booking(booking_reference=booking.booking_reference)

        assert [t.id for t in second.tickets] == [t.id for t in first.tickets]
        assert len(second.tickets) == 3
        assert await flow.seats_left(event) == 7

    @pytest.mark.asyncio
    async def test_confirm_after_hold_expired(self, flow: BookingFlow, event: Event) -> None:
        booking = await flow.hold(event, 2)
        later = datetime.now(timezone.utc) + timedelta(minutes=16)

        with pytest.raises(BookingExpiredError):
            await flow.confirm.confirm_booking(
                booking_reference=booking.booking_reference, now=later
            )

        stored = await flow.store.get_by_reference(booking_reference=booking.booking_reference)
        assert stored is not None
        assert stored.status == BookingStatus.EXPIRED
        assert await flow.seats_left(event) == 10
        assert await flow.store.list_tickets(booking_id=booking.id) == []


@pytest.mark.unit
class TestExpiry:
    @pytest.mark.asyncio
    async def test_read_expires_stale_hold(self, flow: BookingFlow, event: Event) -> None:
        booking = await flow.hold(event, 5)

        result = await flow.get.get_booking(
            booking_reference=booking.booking_reference,
            now=datetime.now(timezone.utc) + timedelta(hours=1),
        )

        assert result.booking.status == BookingStatus.EXPIRED
        assert result.tickets == []
        assert await flow.seats_left(event) == 10

    @pytest.mark.asyncio
    async def test_read_within_hold_keeps_pending(self, flow: BookingFlow, event: Event) -> None:
        booking = await flow.hold(event, 1)

        result = await flow.get.get_booking(booking_reference=booking.booking_reference)

        assert result.booking.status == BookingStatus.PENDING
        assert await flow.seats_left(event) == 9

    @pytest.mark.asyncio
    async def test_sweep_expires_only_stale_pending(self, flow: BookingFlow, event: Event) -> None:
        # Arrange - three stale holds (more than one batch), one fresh, one confirmed
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        stale = [await flow.hold(event, 1, now=past) for _ in range(3)]
        fresh = await flow.hold(event, 2)
        confirmed = await flow.hold(event, 1, now=past)
        await flow.confirm.confirm_booking(
            booking_reference=confirmed.booking_reference, now=past + timedelta(minutes=1)
        )
        assert await flow.seats_left(event) == 4

        # Act
        expired = await flow.sweep.expire_stale_bookings()

        # Assert
        assert expired == 3
        assert await flow.seats_left(event) == 7
        for booking in stale:
            stored = await flow.store.get_by_reference(booking_reference=booking.booking_reference)
            assert stored is not None and stored.status == BookingStatus.EXPIRED
        stored_fresh = await flow.store.get_by_reference(
            booking_reference=fresh.booking_reference
        )
        assert stored_fresh is not None and stored_fresh.status == BookingStatus.PENDING
        assert await flow.sweep.expire_stale_bookings() == 0


class InterleavingBookingStore(InMemoryBookingStore):
    """Gives the event loop away on every read, the way a database round trip does"""

    def __init__(self) -> None:
        super().__init__()
        self.hold_attempts = 0

    async def get_by_id(self, *, event_id: UUID) -> Event | None:
        await asyncio.sleep(0)
        return await super().get_by_id(event_id=event_id)

    async def get_by_reference(self, *, booking_reference: str) -> Booking | None:
        await asyncio.sleep(0)
        return await super().get_by_reference(booking_reference=booking_reference)

    async def sum_active_quantity_for_user(self, *, event_id: UUID, user_id: str) -> int:
        await asyncio.sleep(0)
        return await super().sum_active_quantity_for_user(event_id=event_id, user_id=user_id)

    async def reference_exists(self, *, booking_reference: str) -> bool:
        await asyncio.sleep(0)
        return await super().reference_exists(booking_reference=booking_reference)

    async def hold_seats_and_create_booking(
        self, *, booking: Booking, max_tickets_per_user: int
    ) -> Booking | None:
        self.hold_attempts += 1
        return await super().hold_seats_and_create_booking(
            booking=booking, max_tickets_per_user=max_tickets_per_user
        )


@pytest.mark.unit
class TestConcurrency:
    @pytest.fixture
    def store(self) -> InterleavingBookingStore:
        return InterleavingBookingStore()

    @pytest.mark.asyncio
    async def test_concurrent_holds_never_oversell(
        self, store: InterleavingBookingStore, flow: BookingFlow
    ) -> None:
        # Arrange
        event = await store.add_event(build_event(total_capacity=5, available_seats=5))

        # Act - every request reads 5 free seats before any hold lands
        results = await asyncio.gather(
            *[flow.hold(event, 1, user_id=f'user-{i}') for i in range(12)],
            return_exceptions=True,
        )

        # Assert
        held = [r for r in results if isinstance(r, Booking)]
        rejected = [r for r in results if isinstance(r, CapacityExceededError)]
        assert store.hold_attempts == 12
        assert len(held) == 5
        assert len(rejected) == 7
        assert all(r.available == 0 for r in rejected)
        assert await flow.seats_left(event) == 0

    @pytest.mark.asyncio
    async def test_concurrent_holds_respect_user_limit(
        self, store: InterleavingBookingStore, flow: BookingFlow
    ) -> None:
        # Arrange
        event = await store.add_event(
            build_event(total_capacity=20, available_seats=20, max_tickets_per_user=10)
        )

        # Act - both requests see 0 seats held by the user when validating
        results = await asyncio.gather(
            flow.hold(event, 6, user_id='user-1'),
            flow.hold(event, 6, user_id='user-1'),
            return_exceptions=True,
        )

        # Assert
        held = [r for r in results if isinstance(r, Booking)]
        limited = [r for r in results if isinstance(r, PerUserLimitExceededError)]
        assert store.hold_attempts == 2
        assert len(held) == 1
        assert len(limited) == 1
        assert limited[0].existing == 6
        assert await store.sum_active_quantity_for_user(event_id=event.id, user_id='user-1') == 6
        assert await flow.seats_left(event) == 14

    @pytest.mark.asyncio
    async def test_concurrent_cancels_restore_once(self, flow: BookingFlow, event: Event) -> None:
        booking = await flow.hold(event, 3)

        results = await asyncio.gather(
            *[
                flow.cancel.cancel_or_expire_booking(booking_reference=booking.booking_reference)
                for _ in range(5)
            ]
        )

        assert all(r.status == BookingStatus.CANCELLED for r in results)
        assert await flow.seats_left(event) == 10

    @pytest.mark.asyncio
    async def test_confirm_racing_cancel_has_single_winner(
        self, flow: BookingFlow, event: Event
    ) -> None:
        booking = await flow.hold(event, 2)

        confirm_result, cancel_result = await asyncio.gather(
            flow.confirm.confirm_booking(booking_reference=booking.booking_reference),
            flow.cancel.cancel_or_expire_booking(booking_reference=booking.booking_reference),
            return_exceptions=True,
        )

        stored = await flow.store.get_by_reference(booking_reference=booking.booking_reference)
        assert stored is not None
        if stored.status == BookingStatus.CONFIRMED:
            assert isinstance(cancel_result, InvalidStateTransitionError)
            assert await flow.seats_left(event) == 8
        else:
            assert stored.status == BookingStatus.CANCELLED
            assert isinstance(confirm_result, InvalidStateTransitionError)
            assert await flow.seats_left(event) == 10
