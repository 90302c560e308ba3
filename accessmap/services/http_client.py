"""
Shared HTTP plumbing for the OpenStreetMap-family APIs.

Provides the request throttle and the mapping from httpx failures to the
service's typed exceptions.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import httpx

from accessmap.core.exceptions import (
    RateLimitError,
    RequestTimeoutError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


class RequestThrottle:
    """
    Enforces a minimum interval between outbound requests.

    `last_request_ts` is None until the first request. Each caller reserves
    its dispatch slot synchronously before suspending, so concurrent callers
    end up spaced at least `min_interval` apart.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self.last_request_ts: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def reserve(self) -> float:
        """Claim the next dispatch slot and return how long to wait for it."""
        now = self._clock()
        if self.last_request_ts is None:
            scheduled = now
        else:
            scheduled = max(now, self.last_request_ts + self.min_interval)
        self.last_request_ts = scheduled
        return scheduled - now

    async def wait(self) -> None:
        delay = self.reserve()
        if delay > 0:
            logger.debug(f"Throttling request: waiting {delay * 1000:.0f}ms")
            await self._sleep(delay)


async def send_request(
    method: str,
    url: str,
    *,
    service_name: str,
    timeout: float,
    headers: Optional[dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs: Any,
) -> Any:
    """Issue one request and return the decoded JSON body, raising typed errors."""
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{service_name} request timed out: {e}")
            raise RequestTimeoutError(timeout, details={"service_name": service_name}) from e
        except httpx.HTTPError as e:
            logger.error(f"{service_name} request failed: {e}")
            raise TransportError(
                f"Network error while contacting {service_name}",
                details={"service_name": service_name, "reason": str(e)},
            ) from e

    if response.status_code == 429:
        logger.warning(f"{service_name} rate limit hit")
        raise RateLimitError(service_name)
    if not response.is_success:
        logger.error(f"{service_name} API error: status {response.status_code}")
        raise UpstreamError(response.status_code, service_name)

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"{service_name} returned invalid JSON: {e}")
        raise UpstreamError(
            response.status_code, service_name, message=f"Invalid JSON from {service_name}"
        ) from e
