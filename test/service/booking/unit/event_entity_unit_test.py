"""
Unit tests for the Event entity: construction invariants, booking window
and publication rules
"""

from datetime import datetime, timedelta, timezone

import pytest

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.shared_kernel.domain.enum.event_status import EventStatus
from test.shared.utils import build_event


@pytest.mark.unit
class TestEventInvariants:
    def test_available_seats_cannot_exceed_capacity(self) -> None:
        with pytest.raises(DomainError, match='available_seats'):
            build_event(total_capacity=10, available_seats=11)

    def test_available_seats_cannot_be_negative(self) -> None:
        with pytest.raises(DomainError, match='available_seats'):
            build_event(available_seats=-1)

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(DomainError, match='total_capacity'):
            build_event(total_capacity=0, available_seats=0)

    def test_end_must_be_after_start(self) -> None:
        start = datetime.now(timezone.utc) + timedelta(days=1)

        with pytest.raises(DomainError, match='end_date'):
            build_event(start_date=start, end_date=start)

    def test_coordinates_come_in_pairs(self) -> None:
        with pytest.raises(DomainError, match='together'):
            build_event(latitude=19.0, longitude=None)

    def test_coordinates_must_be_in_range(self) -> None:
        with pytest.raises(DomainError, match='latitude'):
            build_event(latitude=91.0, longitude=0.0)
        with pytest.raises(DomainError, match='longitude'):
            build_event(latitude=0.0, longitude=-181.0)

    def test_zero_coordinates_are_a_real_location(self) -> None:
        event = build_event(latitude=0.0, longitude=0.0)

        assert event.is_geotagged

    def test_event_without_coordinates_is_not_geotagged(self) -> None:
        assert not build_event(latitude=None, longitude=None).is_geotagged

    def test_ticket_limit_uses_default_when_unset(self) -> None:
        assert build_event(max_tickets_per_user=None).ticket_limit(10) == 10
        assert build_event(max_tickets_per_user=4).ticket_limit(10) == 4


@pytest.mark.unit
class TestBookingWindow:
    def test_window_closes_at_event_start_by_default(self) -> None:
        event = build_event()

        assert event.booking_window_open(event.start_date - timedelta(seconds=1))
        assert not event.booking_window_open(event.start_date)

    def test_explicit_window(self) -> None:
        now = datetime.now(timezone.utc)
        event = build_event(
            booking_start_date=now - timedelta(hours=1), booking_end_date=now + timedelta(hours=1)
        )

        assert event.booking_window_open(now)
        assert not event.booking_window_open(now + timedelta(hours=2))
        assert not event.booking_window_open(now - timedelta(hours=2))


@pytest.mark.unit
class TestPublication:
    def test_publish_draft(self) -> None:
        draft = build_event(is_published=False, status=EventStatus.DRAFT)

        published = draft.publish()

        assert published.is_published
        assert published.status == EventStatus.PUBLISHED
        assert published.is_discoverable
        assert published.updated_at is not None
        assert not draft.is_published

    def test_publish_requires_descriptive_fields(self) -> None:
        draft = build_event(is_published=False, status=EventStatus.DRAFT, venue_name='  ')

        with pytest.raises(DomainError, match='Venue name is required'):
            draft.publish()

    def test_publish_twice_is_rejected(self) -> None:
        with pytest.raises(DomainError, match='already published'):
            build_event().publish()

    def test_unpublish(self) -> None:
        unpublished = build_event().unpublish()

        assert not unpublished.is_published
        assert unpublished.status == EventStatus.DRAFT
        assert not unpublished.is_discoverable

    def test_unpublish_draft_is_rejected(self) -> None:
        with pytest.raises(DomainError, match='not published'):
            build_event(is_published=False, status=EventStatus.DRAFT).unpublish()
