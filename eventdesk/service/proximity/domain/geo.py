"""
Great-circle math on a spherical earth

Accurate to about 0.5 %, which is plenty for "events near me".
"""

import math

import attrs

from eventdesk.platform.exception.exceptions import DomainError


EARTH_RADIUS_KM = 6371.0


def _check_latitude(instance: 'GeoPoint', attribute: attrs.Attribute, value: float) -> None:
    if not -90 <= value <= 90:
        raise DomainError('latitude must be between -90 and 90')


def _check_longitude(instance: 'GeoPoint', attribute: attrs.Attribute, value: float) -> None:
    if not -180 <= value <= 180:
        raise DomainError('longitude must be between -180 and 180')


@attrs.frozen
class GeoPoint:
    latitude: float = attrs.field(converter=float, validator=_check_latitude)
    longitude: float = attrs.field(converter=float, validator=_check_longitude)

    def distance_km(self, other: 'GeoPoint') -> float:
        return haversine_distance_km(self.latitude, self.longitude, other.latitude, other.longitude)


def haversine_distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push `a` just past 1 for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f'{round(distance_km * 1000)} m'
    if distance_km < 10:
        return f'{distance_km:.1f} km'
    return f'{round(distance_km)} km'
