from datetime import datetime, timezone
import ipaddress
from typing import Any, Optional

import httpx
import orjson

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.platform.logging.loguru_io import Logger
from eventdesk.service.proximity.app.interface.i_location_provider import ILocationProvider
from eventdesk.service.proximity.domain.geo import GeoPoint
from eventdesk.service.proximity.domain.location_errors import LocationUnavailableError
from eventdesk.service.proximity.domain.location_fix import LocationFix, LocationSource


# City-level estimate, reported as the accuracy radius of an IP fix
IP_FIX_ACCURACY_M = 25_000.0


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


class IpLocationProvider(ILocationProvider):
    """
    Coarse location from the caller's public IP address

    Understands both `latitude`/`longitude` (ipapi.co style) and `lat`/`lon`
    (ip-api.com style) payloads.
    """

    source = LocationSource.IP

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        url_template: str,
        client_ip: Optional[str],
        timeout_seconds: float = 5.0,
    ) -> None:
        self.http_client = http_client
        self.url_template = url_template
        self.client_ip = client_ip
        self.timeout_seconds = timeout_seconds

    def _is_public(self) -> bool:
        if not self.client_ip:
            return False
        try:
            address = ipaddress.ip_address(self.client_ip)
        except ValueError:
            return False
        return address.is_global

    @Logger.io
    async def locate(self) -> LocationFix:
        if not self._is_public():
            raise LocationUnavailableError('No public client IP to geolocate')

        url = self.url_template.format(ip=self.client_ip)
        try:
            response = await self.http_client.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = orjson.loads(response.content)
        except (httpx.HTTPError, orjson.JSONDecodeError) as e:
            raise LocationUnavailableError(f'IP geolocation failed: {type(e).__name__}')

        if not isinstance(payload, dict) or payload.get('error') or payload.get('status') == 'fail':
            raise LocationUnavailableError('IP geolocation service could not place this address')

        latitude = _first(payload, 'latitude', 'lat')
        longitude = _first(payload, 'longitude', 'lon', 'lng')
        if latitude is None or longitude is None:
            raise LocationUnavailableError('IP geolocation returned no coordinates')

        try:
            point = GeoPoint(latitude=latitude, longitude=longitude)
        except (DomainError, TypeError, ValueError):
            raise LocationUnavailableError('IP geolocation returned invalid coordinates')

        return LocationFix(
            point=point,
            source=self.source,
            captured_at=datetime.now(timezone.utc),
            accuracy_m=IP_FIX_ACCURACY_M,
            label=_first(payload, 'city'),
        )
