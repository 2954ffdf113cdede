from datetime import datetime, timezone
from typing import Optional

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.proximity.app.interface.i_device_locator import IDeviceLocator
from eventdesk.service.proximity.domain.geo import GeoPoint
from eventdesk.service.proximity.domain.location_errors import LocationUnavailableError
from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


# Largest reported accuracy radius still treated as a high-accuracy (GPS grade) fix
HIGH_ACCURACY_MAX_METERS = 100.0


class ClientReportedDeviceLocator(IDeviceLocator):
    """
    Device position forwarded by the client with the request

    The client's positioning API has already run; this locator only decides
    whether the reported fix satisfies the requested accuracy tier.
    """

    def __init__(
        self,
        *,
        latitude: Optional[float],
        longitude: Optional[float],
        accuracy_m: Optional[float] = None,
        captured_at: Optional[datetime] = None,
    ) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy_m = accuracy_m
        self.captured_at = captured_at

    async def current_position(
        self, *, high_accuracy: bool, maximum_age_seconds: float
    ) -> LocationFix:
        if self.latitude is None or self.longitude is None:
            raise LocationUnavailableError('Device position was not shared')
        if high_accuracy and (
            self.accuracy_m is None or self.accuracy_m > HIGH_ACCURACY_MAX_METERS
        ):
            raise LocationUnavailableError('Device position is not precise enough')

        try:
            point = GeoPoint(latitude=self.latitude, longitude=self.longitude)
        except DomainError as e:
            raise LocationUnavailableError(f'Device reported an invalid position: {e.message}')

        return LocationFix(
            point=point,
            source=(
                LocationSource.DEVICE_HIGH_ACCURACY
                if high_accuracy
                else LocationSource.DEVICE_LOW_ACCURACY
            ),
            captured_at=self.captured_at or datetime.now(timezone.utc),
            accuracy_m=self.accuracy_m,
        )
