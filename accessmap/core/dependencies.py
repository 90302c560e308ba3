"""
Dependency injection setup for FastAPI.
Wires the place pipeline once per application and hands out one fetch
coordinator per client session.
"""

from collections import OrderedDict
from fastapi import Header, Request
from typing import Optional
import logging

import httpx

from accessmap.config.settings import Settings, get_settings
from accessmap.services import (
    BoundingBoxCalculator,
    FetchCoordinator,
    GeocodingService,
    GeolocationService,
    PlaceAggregator,
    ThrottledRequestExecutor,
)

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-ID"
DEFAULT_SESSION_ID = "default"


class ServiceContainer:
    """
    Container for the pipeline services.

    Upstream clients are shared by every session, so all sessions go through
    the same Overpass throttle. Fetch and filter state lives in a coordinator
    per session id, with the least recently used one evicted past
    `fetch.max_sessions`.

    `transport` replaces the network for every upstream client; tests use it
    to plug in an httpx.MockTransport.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.executor = ThrottledRequestExecutor(self.settings.overpass, transport=transport)
        self.aggregator = PlaceAggregator(self.executor)
        self.geocoder = GeocodingService(self.settings.nominatim, transport=transport)
        self.geolocator = GeolocationService(
            self.geocoder, self.settings.geolocation, transport=transport
        )
        self.calculator = BoundingBoxCalculator(
            max_degree_delta=self.settings.fetch.max_degree_delta,
            named_place_buffer_deg=self.settings.fetch.named_place_buffer_deg,
        )
        self._coordinators: "OrderedDict[str, FetchCoordinator]" = OrderedDict()
        logger.info("Service container initialized")

    @property
    def session_count(self) -> int:
        return len(self._coordinators)

    def coordinator_for(self, session_id: str) -> FetchCoordinator:
        coordinator = self._coordinators.get(session_id)
        if coordinator is not None:
            self._coordinators.move_to_end(session_id)
            return coordinator

        coordinator = FetchCoordinator(
            self.aggregator,
            geocoder=self.geocoder,
            geolocator=self.geolocator,
            config=self.settings.fetch,
            calculator=self.calculator,
        )
        self._coordinators[session_id] = coordinator
        while len(self._coordinators) > self.settings.fetch.max_sessions:
            evicted, _ = self._coordinators.popitem(last=False)
            logger.info(f"Evicted fetch session {evicted}")
        return coordinator


def get_service_container(request: Request) -> ServiceContainer:
    return request.app.state.service_container


def get_fetch_coordinator(
    request: Request,
    session_id: Optional[str] = Header(None, alias=SESSION_HEADER),
) -> FetchCoordinator:
    container = get_service_container(request)
    return container.coordinator_for(session_id or DEFAULT_SESSION_ID)
