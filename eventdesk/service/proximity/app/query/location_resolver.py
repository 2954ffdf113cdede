from typing import Optional, Sequence, Tuple

import attrs

from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.platform.metrics.booking_metrics import metrics
from eventdesk.service.proximity.app.interface.i_location_provider import ILocationProvider
from eventdesk.service.proximity.domain.location_errors import LocationUnavailableError
from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


@attrs.frozen
class LocationAttempt:
    source: LocationSource
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@attrs.frozen
class LocationResolution:
    fix: Optional[LocationFix]
    attempts: Tuple[LocationAttempt, ...] = ()

    @property
    def found(self) -> bool:
        return self.fix is not None


class LocationResolver:
    """
    Tries each provider in order and keeps the first fix

    A provider failing with LocationUnavailableError moves on to the next
    tier; when every tier fails the resolution carries no fix and callers
    fall back to the "location unknown" view.
    """

    def __init__(self, *, providers: Sequence[ILocationProvider]) -> None:
        self.providers = list(providers)

    @Logger.io
    async def resolve(self) -> LocationResolution:
        attempts: list[LocationAttempt] = []
        for provider in self.providers:
            try:
                fix = await provider.locate()
            except LocationUnavailableError as e:
                Logger.base.info(f'📍 [LOCATION] {provider.source} unavailable: {e.message}')
                attempts.append(LocationAttempt(source=provider.source, error=e.message))
                continue

            attempts.append(LocationAttempt(source=provider.source))
            metrics.record_location_resolution(source=str(fix.source))
            return LocationResolution(fix=fix, attempts=tuple(attempts))

        metrics.record_location_resolution(source='unavailable')
        return LocationResolution(fix=None, attempts=tuple(attempts))

    async def resolve_or_raise(self) -> LocationFix:
        resolution = await self.resolve()
        if resolution.fix is None:
            tried = ', '.join(attempt.source for attempt in resolution.attempts) or 'none'
            raise LocationUnavailableError(f'No location source succeeded (tried: {tried})')
        return resolution.fix
