from datetime import datetime, timezone

import anyio

from eventdesk.service.proximity.app.interface.i_device_locator import IDeviceLocator
from eventdesk.service.proximity.app.interface.i_location_provider import ILocationProvider
from eventdesk.service.proximity.domain.location_errors import LocationUnavailableError
from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


class DeviceLocationProvider(ILocationProvider):
    """
    Device positioning tier

    high_accuracy=True is the GPS-grade first attempt (short timeout, fresh
    fix); high_accuracy=False is the coarse retry (longer timeout, older
    cached fix acceptable).
    """

    def __init__(
        self,
        locator: IDeviceLocator,
        *,
        high_accuracy: bool,
        timeout_seconds: float,
        maximum_age_seconds: float,
    ) -> None:
        self.locator = locator
        self.high_accuracy = high_accuracy
        self.timeout_seconds = timeout_seconds
        self.maximum_age_seconds = maximum_age_seconds
        self.source = (
            LocationSource.DEVICE_HIGH_ACCURACY
            if high_accuracy
            else LocationSource.DEVICE_LOW_ACCURACY
        )

    async def locate(self) -> LocationFix:
        try:
            with anyio.fail_after(self.timeout_seconds):
                fix = await self.locator.current_position(
                    high_accuracy=self.high_accuracy,
                    maximum_age_seconds=self.maximum_age_seconds,
                )
        except TimeoutError:
            raise LocationUnavailableError(
                f'Device position timed out after {self.timeout_seconds:g}s'
            )

        age = fix.age(datetime.now(timezone.utc)).total_seconds()
        if age > self.maximum_age_seconds:
            raise LocationUnavailableError(f'Device position is {age:.0f}s old')
        return fix
