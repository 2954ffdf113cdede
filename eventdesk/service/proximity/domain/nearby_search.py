from datetime import datetime, timezone
from typing import Iterable, List, Optional

import attrs

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.proximity.domain.geo import haversine_distance_km
from eventdesk.service.shared_kernel.domain.entity.event_entity import Event


_FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


@attrs.frozen
class NearbyEvent:
    event: Event
    distance_km: Optional[float] = None


def _start_key(event: Event) -> datetime:
    start = event.start_date or _FAR_FUTURE
    return start if start.tzinfo else start.replace(tzinfo=timezone.utc)


def find_nearby_events(
    events: Iterable[Event],
    center_lat: float,
    center_lng: float,
    radius_km: float,
) -> List[NearbyEvent]:
    """
    Geotagged events within `radius_km` of the centre, nearest first

    Events without both coordinates are skipped. Ties on distance keep the
    earlier start date first.
    """
    if radius_km < 0:
        raise DomainError('radius_km cannot be negative')

    nearby: List[NearbyEvent] = []
    for event in events:
        if event.latitude is None or event.longitude is None:
            continue
        distance = haversine_distance_km(center_lat, center_lng, event.latitude, event.longitude)
        if distance <= radius_km:
            nearby.append(NearbyEvent(event=event, distance_km=distance))

    nearby.sort(key=lambda item: (item.distance_km, _start_key(item.event)))
    return nearby


def order_by_start_date(events: Iterable[Event]) -> List[NearbyEvent]:
    return [NearbyEvent(event=event) for event in sorted(events, key=_start_key)]
