from typing import Optional

import attrs

from eventdesk.service.proximity.domain.geo import GeoPoint


@attrs.define
class LocationChangeTracker:
    """
    Decides whether a new position is far enough from the last accepted one
    to be worth re-running a search for.
    """

    threshold_km: float = 1.0
    last_point: Optional[GeoPoint] = None

    def has_moved(self, point: GeoPoint) -> bool:
        if self.last_point is None:
            return True
        return self.last_point.distance_km(point) > self.threshold_km

    def record(self, point: GeoPoint) -> None:
        self.last_point = point

    def reset(self) -> None:
        self.last_point = None
