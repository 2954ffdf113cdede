from typing import List, Optional

from pydantic import BaseModel

from eventdesk.service.proximity.app.query.location_resolver import LocationResolution
from eventdesk.service.proximity.app.query.search_nearby_events_use_case import (
    NearbySearchResult,
)
from eventdesk.service.proximity.domain.geo import format_distance
from eventdesk.service.proximity.domain.nearby_search import NearbyEvent
from eventdesk.service.shared_kernel.driving_adapter.schema.event_schema import EventResponse


class NearbyEventResponse(BaseModel):
    event: EventResponse
    distance_km: Optional[float] = None
    distance_label: Optional[str] = None

    @classmethod
    def from_result(cls, item: NearbyEvent) -> 'NearbyEventResponse':
        return cls(
            event=EventResponse.from_entity(item.event),
            distance_km=None if item.distance_km is None else round(item.distance_km, 3),
            distance_label=None if item.distance_km is None else format_distance(item.distance_km),
        )


class LocationAttemptResponse(BaseModel):
    source: str
    error: Optional[str] = None


class NearbySearchResponse(BaseModel):
    location_known: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    location_source: Optional[str] = None
    location_label: Optional[str] = None
    attempts: List[LocationAttemptResponse] = []
    events: List[NearbyEventResponse] = []

    @classmethod
    def build(
        cls, *, result: NearbySearchResult, resolution: LocationResolution
    ) -> 'NearbySearchResponse':
        return cls(
            location_known=result.location_known,
            latitude=result.center.latitude if result.center else None,
            longitude=result.center.longitude if result.center else None,
            radius_km=result.radius_km,
            location_source=str(result.location_source) if result.location_source else None,
            location_label=resolution.fix.label if resolution.fix else None,
            attempts=[
                LocationAttemptResponse(source=str(attempt.source), error=attempt.error)
                for attempt in resolution.attempts
            ],
            events=[NearbyEventResponse.from_result(item) for item in result.events],
        )
