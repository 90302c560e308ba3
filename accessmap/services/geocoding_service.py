"""
Nominatim geocoding: place-name search and reverse lookups.

Nominatim allows roughly one request per second, so both calls share one
RequestThrottle.
"""

import logging
from typing import Any, Optional

import httpx

from accessmap.config.settings import NominatimSettings
from accessmap.core.exceptions import AccessMapException, InvalidLocationError
from accessmap.services.http_client import RequestThrottle, send_request

logger = logging.getLogger(__name__)

# Address fields tried in order when naming a coordinate
ADDRESS_NAME_FIELDS = ("city", "town", "village", "county", "state")


class GeocodingService:
    def __init__(
        self,
        config: Optional[NominatimSettings] = None,
        throttle: Optional[RequestThrottle] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or NominatimSettings()
        self.base_url = self.config.base_url.rstrip("/")
        self.throttle = throttle or RequestThrottle(self.config.min_request_interval_seconds)
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        await self.throttle.wait()
        return await send_request(
            "GET",
            f"{self.base_url}/{path}",
            service_name="nominatim",
            timeout=self.config.timeout_seconds,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
            params=params,
        )

    async def search(self, query: str) -> dict[str, Any]:
        """
        Look up a free-text place name.

        Returns the first Nominatim result. Raises InvalidLocationError when
        the query is blank or nothing matched.
        """
        query = (query or "").strip()
        if not query:
            raise InvalidLocationError("Please enter a location to search")

        data = await self._get("search", {"q": query, "format": "json", "limit": 1})
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            logger.info(f"No geocoding result for {query!r}")
            raise InvalidLocationError(details={"query": query})
        return data[0]

    async def reverse(self, lat: float, lng: float) -> Optional[str]:
        """Best-effort place name for a coordinate; None on any failure."""
        params = {
            "format": "json",
            "lat": lat,
            "lon": lng,
            "zoom": self.config.reverse_zoom,
            "addressdetails": 1,
        }
        try:
            data = await self._get("reverse", params)
        except AccessMapException as e:
            logger.info(f"Reverse geocoding failed for {lat},{lng}: {e.message}")
            return None

        if not isinstance(data, dict):
            return None
        address = data.get("address")
        if isinstance(address, dict):
            for key in ADDRESS_NAME_FIELDS:
                if address.get(key):
                    return address[key]
        display_name = data.get("display_name")
        if display_name:
            return display_name.split(",")[0].strip() or None
        return None
