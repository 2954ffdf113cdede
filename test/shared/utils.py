from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import httpx
from uuid_utils.compat import uuid7

from eventdesk.service.shared_kernel.domain.entity.event_entity import Event
from eventdesk.service.shared_kernel.domain.enum.event_status import EventStatus


MUMBAI = (19.0760, 72.8777)
DELHI = (28.6139, 77.2090)

# Public address the fake geolocation service places in Pune
PUNE_IP = '8.8.8.8'
UNKNOWN_IP = '1.1.1.1'


def build_event(**overrides: Any) -> Event:
    """Published, bookable event starting in ten days unless overridden"""
    start = overrides.pop('start_date', datetime.now(timezone.utc) + timedelta(days=10))
    capacity = overrides.pop('total_capacity', 10)
    fields: dict[str, Any] = {
        'id': uuid7(),
        'title': 'Sunburn Arena',
        'slug': 'sunburn-arena',
        'short_description': 'Electronic music night',
        'description': 'Headliners and support acts all night long.',
        'venue_name': 'NSCI Dome',
        'venue_address': 'Worli, Mumbai',
        'city': 'Mumbai',
        'latitude': MUMBAI[0],
        'longitude': MUMBAI[1],
        'start_date': start,
        'end_date': start + timedelta(hours=5),
        'total_capacity': capacity,
        'available_seats': capacity,
        'base_price': Decimal('2500'),
        'currency': 'INR',
        'is_published': True,
        'status': EventStatus.PUBLISHED,
    }
    fields.update(overrides)
    return Event(**fields)


def fake_ip_geolocation_handler(request: httpx.Request) -> httpx.Response:
    if PUNE_IP in request.url.path:
        return httpx.Response(
            200, json={'ip': PUNE_IP, 'city': 'Pune', 'latitude': 18.5204, 'longitude': 73.8567}
        )
    return httpx.Response(200, json={'ip': UNKNOWN_IP, 'error': True, 'reason': 'Reserved'})
