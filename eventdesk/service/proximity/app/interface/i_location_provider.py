from abc import ABC, abstractmethod

from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


class ILocationProvider(ABC):
    """One tier of the location fallback chain"""

    source: LocationSource

    @abstractmethod
    async def locate(self) -> LocationFix:
        """
        Raises:
            LocationUnavailableError: this tier cannot produce a fix (denied, timeout, unknown)
        """
        pass
