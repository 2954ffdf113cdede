from datetime import datetime, timezone
from typing import Dict, Optional

from eventdesk.service.proximity.app.interface.i_location_provider import ILocationProvider
from eventdesk.service.proximity.domain.geo import GeoPoint
from eventdesk.service.proximity.domain.location_errors import LocationUnavailableError
from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


NAMED_LOCATIONS: Dict[str, GeoPoint] = {
    'mumbai': GeoPoint(latitude=19.0760, longitude=72.8777),
    'delhi': GeoPoint(latitude=28.6139, longitude=77.2090),
    'bengaluru': GeoPoint(latitude=12.9716, longitude=77.5946),
    'chennai': GeoPoint(latitude=13.0827, longitude=80.2707),
    'kolkata': GeoPoint(latitude=22.5726, longitude=88.3639),
    'hyderabad': GeoPoint(latitude=17.3850, longitude=78.4867),
    'pune': GeoPoint(latitude=18.5204, longitude=73.8567),
}

ALIASES = {
    'bangalore': 'bengaluru',
    'bombay': 'mumbai',
    'new delhi': 'delhi',
    'madras': 'chennai',
    'calcutta': 'kolkata',
}


def lookup_named_location(name: str) -> Optional[GeoPoint]:
    key = ' '.join(name.lower().split())
    return NAMED_LOCATIONS.get(ALIASES.get(key, key))


class ManualLocationProvider(ILocationProvider):
    """Last tier: a city the user picked from the fixed list"""

    source = LocationSource.MANUAL

    def __init__(self, city: Optional[str]) -> None:
        self.city = city

    async def locate(self) -> LocationFix:
        if not self.city:
            raise LocationUnavailableError('No city selected')
        point = lookup_named_location(self.city)
        if point is None:
            raise LocationUnavailableError(f'Unknown city: {self.city}')
        return LocationFix(
            point=point,
            source=self.source,
            captured_at=datetime.now(timezone.utc),
            label=self.city.strip().title(),
        )
