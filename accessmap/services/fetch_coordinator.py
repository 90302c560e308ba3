"""
Fetch coordination for one session.

Decides whether a map move, search or geolocation actually needs a new
Overpass fetch, keeps at most one fetch in flight, and publishes results as
whole replacement sets. Failures are recorded on the state; the previous
places stay visible.
"""

import logging
from typing import Iterable, Optional

from accessmap.config.settings import FetchSettings
from accessmap.core.exceptions import AccessMapException
from accessmap.models.fetch_state import AreaSummary, FetchState, FilterState
from accessmap.models.location import LocationResult
from accessmap.models.place import (
    AccessibilityAttribute,
    BoundingBox,
    DEFAULT_QUERY_ATTRIBUTES,
    Place,
)
from accessmap.services.bounding_box import BoundingBoxCalculator
from accessmap.services.geocoding_service import GeocodingService
from accessmap.services.geolocation_service import GeolocationService, PositionProvider
from accessmap.services.place_aggregator import PlaceAggregator
from accessmap.services.place_filters import filter_places, summarize_area

logger = logging.getLogger(__name__)


class FetchCoordinator:
    def __init__(
        self,
        aggregator: PlaceAggregator,
        geocoder: Optional[GeocodingService] = None,
        geolocator: Optional[GeolocationService] = None,
        config: Optional[FetchSettings] = None,
        calculator: Optional[BoundingBoxCalculator] = None,
    ):
        self.aggregator = aggregator
        self.geocoder = geocoder
        self.geolocator = geolocator
        self.config = config or FetchSettings()
        self.calculator = calculator or BoundingBoxCalculator(
            max_degree_delta=self.config.max_degree_delta,
            named_place_buffer_deg=self.config.named_place_buffer_deg,
        )
        self.state = FetchState()
        self.filters = FilterState()

    # Filters

    def set_filters(
        self, attributes: Iterable[AccessibilityAttribute] = (), area: str = ""
    ) -> None:
        self.filters = FilterState(attributes=frozenset(attributes), area=area or "")

    def active_attributes(self) -> frozenset[AccessibilityAttribute]:
        return self.filters.attributes or DEFAULT_QUERY_ATTRIBUTES

    def visible_places(self) -> list[Place]:
        return filter_places(self.state.current_places, self.filters.attributes)

    def area_summary(self) -> Optional[AreaSummary]:
        return summarize_area(self.state.current_places, self.filters.area)

    # Fetching

    def _near_last_fetch(self, lat: float, lng: float) -> bool:
        center = self.state.last_fetch_center
        if center is None:
            return False
        epsilon = self.config.refetch_epsilon_deg
        return abs(center[0] - lat) < epsilon and abs(center[1] - lng) < epsilon

    async def request_fetch(
        self,
        lat: float,
        lng: float,
        radius_km: Optional[float] = None,
        force_refresh: bool = False,
    ) -> bool:
        """
        Fetch places around (lat, lng) unless the fetch would be redundant.

        Returns True when a fetch was attempted. Requests near the last
        fetched center are skipped unless forced; requests arriving while a
        fetch is in flight are dropped.
        """
        if not force_refresh and self._near_last_fetch(lat, lng):
            logger.debug(f"Skipping fetch: {lat},{lng} is within epsilon of last fetch")
            return False
        if self.state.is_loading:
            logger.debug("Skipping fetch: another fetch is in flight")
            return False

        radius = radius_km if radius_km is not None else self.config.default_radius_km
        self._begin()
        try:
            bounds = self.calculator.from_center(lat, lng, radius)
            await self._fetch(bounds, (lat, lng))
        except AccessMapException as e:
            self._fail(e)
        finally:
            self.state.is_loading = False
        return True

    async def search_area(self, query: str, force_refresh: bool = True) -> bool:
        """Geocode `query` and fetch places inside the resulting bounds."""
        if self.geocoder is None:
            raise RuntimeError("FetchCoordinator has no geocoder configured")
        if self.state.is_loading:
            logger.debug("Skipping search: another fetch is in flight")
            return False

        # Held across geocoding; errors are cleared only once a fetch starts
        self.state.is_loading = True
        try:
            result = await self.geocoder.search(query)
            bounds = self.calculator.from_named_place_lookup(result)
            center = bounds.center
            if not force_refresh and self._near_last_fetch(*center):
                logger.debug(f"Skipping search fetch for {query!r}: same area as last fetch")
                return False
            self._begin()
            await self._fetch(bounds, center)
        except AccessMapException as e:
            self._fail(e)
        finally:
            self.state.is_loading = False
        return True

    async def request_viewport_fetch(
        self,
        south: float,
        west: float,
        north: float,
        east: float,
        force_refresh: bool = False,
    ) -> bool:
        """
        Fetch places inside a visible map viewport.

        The viewport center is compared with the last fetch the same way
        `request_fetch` compares a requested center.
        """
        try:
            bounds = self.calculator.from_corners(south, west, north, east)
        except AccessMapException as e:
            self._fail(e)
            return False

        center = bounds.center
        if not force_refresh and self._near_last_fetch(*center):
            logger.debug(f"Skipping viewport fetch: {center} is within epsilon of last fetch")
            return False
        if self.state.is_loading:
            logger.debug("Skipping viewport fetch: another fetch is in flight")
            return False

        self._begin()
        try:
            await self._fetch(bounds, center)
        except AccessMapException as e:
            self._fail(e)
        finally:
            self.state.is_loading = False
        return True

    async def locate(self, position_provider: Optional[PositionProvider] = None) -> LocationResult:
        """Resolve the user's location through the geolocation fallback chain."""
        if self.geolocator is None:
            raise RuntimeError("FetchCoordinator has no geolocator configured")
        return await self.geolocator.resolve(position_provider)

    def _begin(self) -> None:
        self.state.is_loading = True
        self.state.last_error = None
        self.state.last_error_message = None

    async def _fetch(self, bounds: BoundingBox, center: tuple[float, float]) -> None:
        places = await self.aggregator.aggregate(bounds, self.active_attributes())
        self.state.current_places = tuple(places)
        self.state.last_fetch_center = center

    def _fail(self, error: AccessMapException) -> None:
        logger.warning(f"Fetch failed ({error.error_code.value}): {error.message}")
        self.state.last_error = error.error_code
        self.state.last_error_message = error.message
