"""Throttled request executor for the Overpass API."""

import logging
from typing import Any, Optional

import httpx

from accessmap.config.settings import OverpassSettings
from accessmap.core.exceptions import UpstreamError
from accessmap.services.http_client import RequestThrottle, send_request

logger = logging.getLogger(__name__)


class ThrottledRequestExecutor:
    """
    Serializes Overpass queries behind a shared RequestThrottle.

    One instance should be shared by everything talking to the same Overpass
    endpoint; separate instances throttle independently.
    """

    def __init__(
        self,
        config: Optional[OverpassSettings] = None,
        throttle: Optional[RequestThrottle] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or OverpassSettings()
        self.throttle = throttle or RequestThrottle(self.config.min_request_interval_seconds)
        self._transport = transport

    @property
    def last_request_ts(self) -> Optional[float]:
        return self.throttle.last_request_ts

    async def execute(self, query: str) -> dict[str, Any]:
        """POST one query (form field `data`) and return the JSON response."""
        await self.throttle.wait()
        data = await send_request(
            "POST",
            self.config.api_url,
            service_name="overpass",
            timeout=self.config.request_timeout_seconds,
            headers={"User-Agent": self.config.user_agent},
            transport=self._transport,
            data={"data": query},
        )
        if not isinstance(data, dict):
            raise UpstreamError(200, "overpass", message="Unexpected Overpass response shape")
        return data
