"""
Booking Command Repository Interface

Every seat-changing operation is a single atomic step: the conditional seat
update and the booking write either both happen or neither does.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from uuid import UUID

from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import Ticket


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def reference_exists(self, *, booking_reference: str) -> bool:
        pass

    @abstractmethod
    async def get_by_reference(self, *, booking_reference: str) -> Booking | None:
        pass

    @abstractmethod
    async def sum_active_quantity_for_user(self, *, event_id: UUID, user_id: str) -> int:
        """Seats held by the user's pending and confirmed bookings for the event"""
        pass

    @abstractmethod
    async def hold_seats_and_create_booking(
        self, *, booking: Booking, max_tickets_per_user: int
    ) -> Booking | None:
        """
        Decrement available_seats by booking.quantity and insert the booking

        The user's active seats for the event are summed in the same atomic
        step, so concurrent requests by one user cannot pass the limit together.

        Returns:
            The stored booking, or None when fewer than booking.quantity seats remain

        Raises:
            PerUserLimitExceededError: the user's active seats plus booking.quantity
                exceed max_tickets_per_user
        """
        pass

    @abstractmethod
    async def confirm_booking_and_issue_tickets(
        self, *, booking: Booking, tickets: List[Ticket]
    ) -> Booking | None:
        """
        Store the confirmed booking and its tickets if it is still pending

        Returns:
            The confirmed booking, or None when the stored booking is no longer pending
        """
        pass

    @abstractmethod
    async def release_seats_and_close_booking(self, *, booking: Booking) -> Booking | None:
        """
        Store the cancelled / expired booking and restore its seats if it is still pending

        Seats are restored at most up to total_capacity.

        Returns:
            The closed booking, or None when the stored booking is no longer pending
        """
        pass

    @abstractmethod
    async def list_tickets(self, *, booking_id: UUID) -> List[Ticket]:
        pass

    @abstractmethod
    async def list_expired_pending(self, *, now: datetime, limit: int = 100) -> List[Booking]:
        pass
