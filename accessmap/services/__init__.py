# Place pipeline services

from .bounding_box import BoundingBoxCalculator
from .query_builder import build_query, has_query
from .http_client import RequestThrottle, send_request
from .overpass_client import ThrottledRequestExecutor
from .element_classifier import classify
from .place_aggregator import PlaceAggregator, deduplicate
from .place_filters import filter_places, summarize_area
from .geocoding_service import GeocodingService
from .geolocation_service import GeolocationService, StaticPositionProvider
from .fetch_coordinator import FetchCoordinator

__all__ = [
    "BoundingBoxCalculator",
    "build_query",
    "has_query",
    "RequestThrottle",
    "send_request",
    "ThrottledRequestExecutor",
    "classify",
    "PlaceAggregator",
    "deduplicate",
    "filter_places",
    "summarize_area",
    "GeocodingService",
    "GeolocationService",
    "StaticPositionProvider",
    "FetchCoordinator",
]
