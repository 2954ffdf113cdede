from datetime import datetime, timedelta
from enum import StrEnum
from typing import Optional

import attrs

from eventdesk.service.proximity.domain.geo import GeoPoint


class LocationSource(StrEnum):
    DEVICE_HIGH_ACCURACY = 'device_high_accuracy'
    DEVICE_LOW_ACCURACY = 'device_low_accuracy'
    IP = 'ip'
    MANUAL = 'manual'


@attrs.frozen
class LocationFix:
    point: GeoPoint
    source: LocationSource
    captured_at: datetime
    accuracy_m: Optional[float] = None
    label: Optional[str] = None

    def age(self, now: datetime) -> timedelta:
        return now - self.captured_at
