#!/usr/bin/env python3
"""
Database Seed Script
Populate sample events into the database (STORAGE_BACKEND=postgres)

Creates one published event per named city, starting next week, so the
nearby search and booking endpoints have something to work with.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from uuid_utils.compat import uuid7

from eventdesk.platform.config.di import container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.booking.driven_adapter.repo.event_repo_impl import EventRepoImpl
from eventdesk.service.proximity.driven_adapter.location.manual_location_provider import (
    NAMED_LOCATIONS,
)
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event
from eventdesk.service.shared_kernel.domain.enum.event_status import EventStatus


SEATS_PER_EVENT = 200


async def seed() -> None:
    database = container.database()
    await database.create_db_and_tables()
    repo = EventRepoImpl(session_factory=database.session)

    start = (datetime.now(timezone.utc) + timedelta(days=7)).replace(
        hour=18, minute=0, second=0, microsecond=0
    )
    for index, (city, point) in enumerate(NAMED_LOCATIONS.items()):
        title = f'{city.title()} Indie Night'
        event = Event(
            id=uuid7(),
            slug=f'{city}-indie-night',
            title=title,
            short_description=f'Live indie acts in {city.title()}',
            description=f'An evening of local bands in {city.title()}.',
            venue_name=f'{city.title()} Arts Centre',
            venue_address=f'Main Road, {city.title()}',
            city=city.title(),
            latitude=point.latitude,
            longitude=point.longitude,
            start_date=start + timedelta(days=index),
            end_date=start + timedelta(days=index, hours=4),
            total_capacity=SEATS_PER_EVENT,
            available_seats=SEATS_PER_EVENT,
            base_price=Decimal('499.00'),
            currency='INR',
            is_published=True,
            status=EventStatus.PUBLISHED,
        )
        await repo.add_event(event)
        Logger.base.info(f'🌱 [SEED] {title} ({event.id})')

    await database.dispose()


if __name__ == '__main__':
    asyncio.run(seed())
