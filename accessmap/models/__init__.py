"""
Models package for the accessibility mapping service.

Immutable domain values for the place pipeline plus the mutable per-session
fetch state.
"""

from .location import (
    Coordinates,
    LocationKind,
    LocationResult,
    GeolocationOptions,
)
from .place import (
    AccessibilityAttribute,
    DEFAULT_QUERY_ATTRIBUTES,
    BoundingBox,
    RawElement,
    Place,
)
from .fetch_state import FetchState, FilterState, AreaSummary

__all__ = [
    "Coordinates",
    "LocationKind",
    "LocationResult",
    "GeolocationOptions",
    "AccessibilityAttribute",
    "DEFAULT_QUERY_ATTRIBUTES",
    "BoundingBox",
    "RawElement",
    "Place",
    "FetchState",
    "FilterState",
    "AreaSummary",
]
