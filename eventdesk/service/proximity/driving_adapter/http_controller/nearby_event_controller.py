from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query, Request
import httpx
from opentelemetry import trace

from eventdesk.platform.config.core_setting import Settings
from eventdesk.platform.config.di import Container
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.proximity.app.query.location_resolver import LocationResolver
from eventdesk.service.proximity.app.query.search_nearby_events_use_case import (
    SearchNearbyEventsUseCase,
)
from eventdesk.service.proximity.driven_adapter.location.client_reported_device_locator import (
    ClientReportedDeviceLocator,
)
from eventdesk.service.proximity.driven_adapter.location.device_location_provider import (
    DeviceLocationProvider,
)
from eventdesk.service.proximity.driven_adapter.location.ip_location_provider import (
    IpLocationProvider,
)
from eventdesk.service.proximity.driven_adapter.location.manual_location_provider import (
    ManualLocationProvider,
)
from eventdesk.service.proximity.driving_adapter.http_controller.schema.nearby_schema import (
    NearbySearchResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _client_ip(request: Request) -> Optional[str]:
    if forwarded := request.headers.get('x-forwarded-for'):
        return forwarded.split(',')[0].strip()
    return request.client.host if request.client else None


@inject
async def get_location_resolver(
    request: Request,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    accuracy_m: Optional[float] = Query(None, ge=0),
    city: Optional[str] = Query(None, max_length=80),
    http_client: httpx.AsyncClient = Depends(Provide[Container.ip_geolocation_http_client]),
    settings: Settings = Depends(Provide[Container.config_service]),
) -> LocationResolver:
    """Device (precise, then coarse) -> caller IP -> picked city"""
    device = ClientReportedDeviceLocator(latitude=lat, longitude=lng, accuracy_m=accuracy_m)
    return LocationResolver(
        providers=[
            DeviceLocationProvider(
                device,
                high_accuracy=True,
                timeout_seconds=settings.DEVICE_HIGH_ACCURACY_TIMEOUT_SECONDS,
                maximum_age_seconds=settings.DEVICE_HIGH_ACCURACY_MAXIMUM_AGE_SECONDS,
            ),
            DeviceLocationProvider(
                device,
                high_accuracy=False,
                timeout_seconds=settings.DEVICE_LOW_ACCURACY_TIMEOUT_SECONDS,
                maximum_age_seconds=settings.DEVICE_LOW_ACCURACY_MAXIMUM_AGE_SECONDS,
            ),
            IpLocationProvider(
                http_client=http_client,
                url_template=settings.IP_GEOLOCATION_URL,
                client_ip=_client_ip(request),
                timeout_seconds=settings.IP_GEOLOCATION_TIMEOUT_SECONDS,
            ),
            ManualLocationProvider(city),
        ]
    )


@router.get('/nearby')
@Logger.io
async def search_nearby_events(
    radius_km: Optional[float] = Query(None, ge=0, le=20_000),
    resolver: LocationResolver = Depends(get_location_resolver),
    use_case: SearchNearbyEventsUseCase = Depends(SearchNearbyEventsUseCase.depends),
) -> NearbySearchResponse:
    with tracer.start_as_current_span('controller.search_nearby_events') as span:
        resolution = await resolver.resolve()
        fix = resolution.fix
        span.set_attribute('nearby.location_source', str(fix.source) if fix else 'unknown')

        result = await use_case.search(
            center=fix.point if fix else None,
            radius_km=radius_km,
            location_source=fix.source if fix else None,
        )
        return NearbySearchResponse.build(result=result, resolution=resolution)
