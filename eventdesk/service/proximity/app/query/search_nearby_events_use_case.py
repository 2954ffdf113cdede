from datetime import datetime, timezone
import time
from typing import List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from eventdesk.platform.config.core_setting import Settings
from eventdesk.platform.config.di import Container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.platform.metrics.booking_metrics import metrics
from eventdesk.service.proximity.app.interface.i_event_location_query_repo import (
    IEventLocationQueryRepo,
)
from eventdesk.service.proximity.domain.geo import GeoPoint
from eventdesk.service.proximity.domain.location_fix import LocationSource
from eventdesk.service.proximity.domain.nearby_search import (
    NearbyEvent,
    find_nearby_events,
    order_by_start_date,
)


@attrs.frozen
class NearbySearchResult:
    events: List[NearbyEvent]
    location_known: bool
    center: Optional[GeoPoint] = None
    radius_km: Optional[float] = None
    location_source: Optional[LocationSource] = None


class SearchNearbyEventsUseCase:
    """
    Upcoming published events around a point

    Without a point ("location unknown") every upcoming event is returned in
    start-date order, with no distances and no radius filter.
    """

    def __init__(
        self, *, event_location_query_repo: IEventLocationQueryRepo, settings: Settings
    ) -> None:
        self.event_location_query_repo = event_location_query_repo
        self.settings = settings
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        event_location_query_repo: IEventLocationQueryRepo = Depends(
            Provide[Container.event_location_query_repo]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(event_location_query_repo=event_location_query_repo, settings=settings)

    @Logger.io(truncate_content=True)
    async def search(
        self,
        *,
        center: Optional[GeoPoint],
        radius_km: Optional[float] = None,
        location_source: Optional[LocationSource] = None,
        now: Optional[datetime] = None,
    ) -> NearbySearchResult:
        started = time.perf_counter()
        now = now or datetime.now(timezone.utc)
        radius = self.settings.NEARBY_DEFAULT_RADIUS_KM if radius_km is None else radius_km

        with self.tracer.start_as_current_span(
            'use_case.search_nearby_events',
            attributes={'nearby.location_known': center is not None, 'nearby.radius_km': radius},
        ):
            events = await self.event_location_query_repo.list_discoverable_events(
                ends_after=now
            )

            if center is None:
                result = NearbySearchResult(
                    events=order_by_start_date(events), location_known=False
                )
            else:
                result = NearbySearchResult(
                    events=find_nearby_events(events, center.latitude, center.longitude, radius),
                    location_known=True,
                    center=center,
                    radius_km=radius,
                    location_source=location_source,
                )

        metrics.record_nearby_search(
            location_known=result.location_known, duration=time.perf_counter() - started
        )
        return result
