"""
Unit tests for Booking, Ticket issuance and AttendeeInfo
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import attrs
import pytest
from uuid_utils.compat import uuid7

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.booking.domain.booking_errors import InvalidStateTransitionError
from eventdesk.service.booking.domain.booking_policy import compute_price
from eventdesk.service.booking.domain.entity.booking_entity import Booking
from eventdesk.service.booking.domain.entity.ticket_entity import issue_tickets
from eventdesk.service.booking.domain.enum.booking_status import BookingStatus
from eventdesk.service.booking.domain.enum.ticket_status import TicketStatus
from eventdesk.service.booking.domain.value_object.attendee_info import AttendeeInfo


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_booking(quantity: int = 2, attendee_info: AttendeeInfo | None = None) -> Booking:
    return Booking.create(
        booking_reference='BKTEST0001',
        event_id=uuid7(),
        user_id='user-1',
        user_email='owner@example.com',
        quantity=quantity,
        attendee_info=attendee_info
        or AttendeeInfo(names=['Asha'] * quantity, emails=[''] * quantity),
        price=compute_price(Decimal('2500'), quantity, Decimal('0.03')),
        hold_minutes=15,
        now=NOW,
    )


@pytest.mark.unit
class TestBookingCreate:
    def test_create__pending_with_hold_and_price(self) -> None:
        booking = make_booking()

        assert booking.status == BookingStatus.PENDING
        assert booking.expires_at == NOW + timedelta(minutes=15)
        assert booking.total_amount == Decimal('5150.00')
        assert booking.subtotal == Decimal('5000.00')
        assert booking.id.version == 7
        assert booking.is_active

    def test_create__rejects_price_for_other_quantity(self) -> None:
        with pytest.raises(DomainError, match='does not match'):
            Booking.create(
                booking_reference='BKTEST0002',
                event_id=uuid7(),
                user_id='user-1',
                user_email=None,
                quantity=3,
                attendee_info=AttendeeInfo(names=['a', 'b', 'c'], emails=['', '', '']),
                price=compute_price('100', 2, '0.03'),
                hold_minutes=15,
            )

    def test_create__rejects_attendee_count_mismatch(self) -> None:
        with pytest.raises(DomainError, match='attendee names'):
            make_booking(quantity=2, attendee_info=AttendeeInfo(names=['Asha'], emails=['', '']))

    def test_create__rejects_invalid_attendee_email(self) -> None:
        info = AttendeeInfo(names=['Asha'], emails=['not-an-email'])

        with pytest.raises(DomainError, match='invalid email'):
            make_booking(quantity=1, attendee_info=info)


@pytest.mark.unit
class TestBookingTransitions:
    def test_confirm__from_pending(self) -> None:
        confirmed = make_booking().confirm(now=NOW)

        assert confirmed.status == BookingStatus.CONFIRMED
        assert confirmed.confirmed_at == NOW

    @pytest.mark.parametrize('status', [BookingStatus.CANCELLED, BookingStatus.EXPIRED])
    def test_close__from_pending(self, status: BookingStatus) -> None:
        closed = make_booking().close(status=status, now=NOW)

        assert closed.status == status
        assert closed.cancelled_at == NOW
        assert not closed.is_active

    def test_close__rejects_non_closing_status(self) -> None:
        with pytest.raises(DomainError):
            make_booking().close(status=BookingStatus.CONFIRMED)

    def test_confirmed_booking_cannot_be_cancelled(self) -> None:
        confirmed = make_booking().confirm(now=NOW)

        with pytest.raises(InvalidStateTransitionError):
            confirmed.close(status=BookingStatus.CANCELLED)

    def test_terminal_booking_cannot_be_confirmed(self) -> None:
        expired = make_booking().close(status=BookingStatus.EXPIRED, now=NOW)

        with pytest.raises(InvalidStateTransitionError):
            expired.confirm()

    def test_hold_expiry_boundary(self) -> None:
        booking = make_booking()

        assert not booking.is_hold_expired(NOW + timedelta(minutes=14, seconds=59))
        assert booking.is_hold_expired(NOW + timedelta(minutes=15))
        assert not booking.confirm(now=NOW).is_hold_expired(NOW + timedelta(days=1))


@pytest.mark.unit
class TestIssueTickets:
    def test_one_ticket_per_seat_with_fallbacks(self) -> None:
        info = AttendeeInfo(
            names=['Asha Rao', ''],
            emails=['asha@example.com', ''],
            phones=['+91 98200 00000', ''],
        )
        confirmed = make_booking(quantity=2, attendee_info=info).confirm(now=NOW)

        tickets = issue_tickets(confirmed, now=NOW)

        assert len(tickets) == 2
        assert [t.attendee_name for t in tickets] == ['Asha Rao', 'Guest']
        assert [t.attendee_email for t in tickets] == ['asha@example.com', 'owner@example.com']
        assert [t.attendee_phone for t in tickets] == ['+91 98200 00000', None]
        assert all(t.status == TicketStatus.ACTIVE for t in tickets)
        assert all(t.booking_id == confirmed.id for t in tickets)
        assert len({t.id for t in tickets}) == 2

    def test_email_falls_back_to_empty_without_owner_email(self) -> None:
        confirmed = attrs.evolve(make_booking(quantity=1), user_email=None).confirm(now=NOW)

        tickets = issue_tickets(confirmed)

        assert tickets[0].attendee_email == ''

    def test_pending_booking_gets_no_tickets(self) -> None:
        with pytest.raises(DomainError):
            issue_tickets(make_booking())


@pytest.mark.unit
class TestAttendeeInfo:
    def test_values_are_stripped_and_none_becomes_blank(self) -> None:
        info = AttendeeInfo(names=['  Asha ', None], emails=['a@b.co', ''])

        assert info.names == ('Asha', '')
        assert info.to_dict() == {'names': ['Asha', ''], 'emails': ['a@b.co', ''], 'phones': []}

    def test_phones_are_optional(self) -> None:
        AttendeeInfo(names=['a', 'b'], emails=['', '']).validate_for(2)

    def test_phone_count_must_match_when_given(self) -> None:
        with pytest.raises(DomainError, match='phones'):
            AttendeeInfo(names=['a', 'b'], emails=['', ''], phones=['1']).validate_for(2)
