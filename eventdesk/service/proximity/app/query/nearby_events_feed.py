from typing import Optional, Self

from eventdesk.platform.config.core_setting import Settings
from eventdesk.service.proximity.app.query.search_nearby_events_use_case import (
    NearbySearchResult,
    SearchNearbyEventsUseCase,
)
from eventdesk.service.proximity.domain.geo import GeoPoint
from eventdesk.service.proximity.domain.location_change_tracker import LocationChangeTracker
from eventdesk.service.proximity.domain.location_fix import LocationSource


class NearbyEventsFeed:
    """
    Keeps a nearby search result fresh for a moving client

    A new position only triggers a new search when it is more than the
    tracker's threshold away from the last searched position, or when the
    radius changes.
    """

    def __init__(
        self, *, use_case: SearchNearbyEventsUseCase, tracker: LocationChangeTracker
    ) -> None:
        self.use_case = use_case
        self.tracker = tracker
        self.last_result: Optional[NearbySearchResult] = None
        self._last_radius_km: Optional[float] = None
        self.search_count = 0

    @classmethod
    def for_settings(cls, *, use_case: SearchNearbyEventsUseCase, settings: Settings) -> Self:
        return cls(
            use_case=use_case,
            tracker=LocationChangeTracker(threshold_km=settings.LOCATION_CHANGE_THRESHOLD_KM),
        )

    async def update(
        self,
        point: Optional[GeoPoint],
        *,
        radius_km: Optional[float] = None,
        location_source: Optional[LocationSource] = None,
    ) -> NearbySearchResult:
        if self._is_current(point, radius_km):
            return self.last_result  # type: ignore[return-value]

        if point is None:
            self.tracker.reset()
        else:
            self.tracker.record(point)

        self.last_result = await self.use_case.search(
            center=point, radius_km=radius_km, location_source=location_source
        )
        self._last_radius_km = radius_km
        self.search_count += 1
        return self.last_result

    def _is_current(self, point: Optional[GeoPoint], radius_km: Optional[float]) -> bool:
        if self.last_result is None or radius_km != self._last_radius_km:
            return False
        if point is None:
            return not self.last_result.location_known
        if not self.last_result.location_known:
            return False
        return not self.tracker.has_moved(point)
