"""
User location detection.

Tries, in order: the caller's precise position, an IP-based estimate, and a
fixed country-level default. Each step falls through to the next on failure,
so `resolve` always returns a location.
"""

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Optional

import httpx

from accessmap.config.settings import GeolocationSettings
from accessmap.core.exceptions import AccessMapException, GeolocationDeniedError
from accessmap.models.location import (
    Coordinates,
    GeolocationOptions,
    LocationKind,
    LocationResult,
)
from accessmap.services.geocoding_service import GeocodingService
from accessmap.services.http_client import send_request

logger = logging.getLogger(__name__)

PositionProvider = Callable[[GeolocationOptions], Awaitable[Coordinates]]


class StaticPositionProvider:
    """Position reported by the client; a missing coordinate counts as refusal."""

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude

    async def __call__(self, options: GeolocationOptions) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise GeolocationDeniedError("Position not shared by the client")
        return Coordinates(self.latitude, self.longitude)


class GeolocationService:
    def __init__(
        self,
        geocoder: GeocodingService,
        config: Optional[GeolocationSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.geocoder = geocoder
        self.config = config or GeolocationSettings()
        self._transport = transport

    @property
    def options(self) -> GeolocationOptions:
        return GeolocationOptions(
            enable_high_accuracy=self.config.enable_high_accuracy,
            timeout_seconds=self.config.timeout_seconds,
            maximum_age_seconds=self.config.maximum_age_seconds,
        )

    async def resolve(self, position_provider: Optional[PositionProvider] = None) -> LocationResult:
        if position_provider is not None:
            precise = await self._precise_location(position_provider)
            if precise is not None:
                return precise

        estimated = await self._ip_location()
        if estimated is not None:
            return estimated

        logger.info("Falling back to default location")
        return self.default_location()

    def default_location(self) -> LocationResult:
        return LocationResult(
            kind=LocationKind.DEFAULT,
            latitude=self.config.default_latitude,
            longitude=self.config.default_longitude,
            name=self.config.default_name,
        )

    async def _precise_location(self, provider: PositionProvider) -> Optional[LocationResult]:
        options = self.options
        try:
            coords = await asyncio.wait_for(provider(options), timeout=options.timeout_seconds)
        except AccessMapException as e:
            logger.info(f"Browser geolocation failed: {e.message}")
            return None
        except asyncio.TimeoutError:
            logger.info("Browser geolocation timed out")
            return None

        name = await self.geocoder.reverse(coords.latitude, coords.longitude)
        return LocationResult(
            kind=LocationKind.PRECISE,
            latitude=coords.latitude,
            longitude=coords.longitude,
            name=name or "Your Location",
        )

    async def _ip_location(self) -> Optional[LocationResult]:
        try:
            data = await send_request(
                "GET",
                self.config.ip_lookup_url,
                service_name="ip-geolocation",
                timeout=self.config.ip_lookup_timeout_seconds,
                transport=self._transport,
            )
        except AccessMapException as e:
            logger.info(f"IP geolocation failed: {e.message}")
            return None

        if not isinstance(data, dict):
            return None
        latitude = _coordinate(data.get("latitude"))
        longitude = _coordinate(data.get("longitude"))
        if latitude is None or longitude is None:
            logger.info("IP geolocation returned no coordinates")
            return None

        name = (
            data.get("city")
            or data.get("region")
            or data.get("country_name")
            or "Estimated Location"
        )
        return LocationResult(
            kind=LocationKind.ESTIMATED,
            latitude=latitude,
            longitude=longitude,
            name=name,
        )


def _coordinate(value: Any) -> Optional[float]:
    # Zero counts as missing
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed or None
