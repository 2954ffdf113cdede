from abc import ABC, abstractmethod

from eventdesk.service.proximity.domain.location_fix import LocationFix


class IDeviceLocator(ABC):
    """Positioning hardware (or whatever reports on its behalf)"""

    @abstractmethod
    async def current_position(
        self, *, high_accuracy: bool, maximum_age_seconds: float
    ) -> LocationFix:
        """
        Raises:
            LocationUnavailableError: permission denied or no position
        """
        pass
