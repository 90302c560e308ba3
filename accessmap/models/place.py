"""
Domain models for the place pipeline.

Raw Overpass elements come in with an open-ended tag mapping and are turned
into immutable Place values by the element classifier.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from accessmap.models.location import Coordinates


class AccessibilityAttribute(str, Enum):
    """Accessibility categories used both as filters and as classification labels."""
    WHEELCHAIR = "wheelchair"
    BRAILLE = "braille"
    TACTILE = "tactile"
    TOILET = "toilet"
    ELEVATOR = "elevator"
    ELDERLY = "elderly"


# Braille and elderly have no reliable OSM tag to query on
DEFAULT_QUERY_ATTRIBUTES = frozenset({
    AccessibilityAttribute.WHEELCHAIR,
    AccessibilityAttribute.TOILET,
    AccessibilityAttribute.ELEVATOR,
    AccessibilityAttribute.TACTILE,
})


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular latitude/longitude region. Antimeridian wraparound is not supported."""
    south: float
    north: float
    west: float
    east: float

    def __post_init__(self):
        values = (self.south, self.north, self.west, self.east)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Bounding box coordinates must be finite: {values}")
        if not (self.south < self.north and self.west < self.east):
            raise ValueError(
                f"Invalid bounding box: south={self.south} north={self.north} "
                f"west={self.west} east={self.east}"
            )

    @property
    def center(self) -> tuple[float, float]:
        return ((self.south + self.north) / 2, (self.west + self.east) / 2)

    def to_overpass(self) -> str:
        """Overpass QL bbox filter order: south,west,north,east."""
        return f"{self.south},{self.west},{self.north},{self.east}"

    def to_dict(self) -> dict:
        return {
            "south": self.south,
            "north": self.north,
            "west": self.west,
            "east": self.east,
        }


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _point(data: Any) -> Optional[Coordinates]:
    if not isinstance(data, Mapping):
        return None
    lat = _as_float(data.get("lat"))
    lon = _as_float(data.get("lon"))
    if lat is None or lon is None:
        return None
    return Coordinates(lat, lon)


def _center_substitute(data: Mapping[str, Any]) -> Optional[Coordinates]:
    """Center for ways/relations: `center`, else `bounds` midpoint, else vertex mean."""
    center = _point(data.get("center"))
    if center is not None:
        return center

    bounds = data.get("bounds")
    if isinstance(bounds, Mapping):
        corners = [_as_float(bounds.get(k)) for k in ("minlat", "maxlat", "minlon", "maxlon")]
        if all(c is not None for c in corners):
            minlat, maxlat, minlon, maxlon = corners
            return Coordinates((minlat + maxlat) / 2, (minlon + maxlon) / 2)

    geometry = data.get("geometry")
    if isinstance(geometry, list):
        points = [p for p in (_point(g) for g in geometry) if p is not None]
        if points:
            return Coordinates(
                sum(p.latitude for p in points) / len(points),
                sum(p.longitude for p in points) / len(points),
            )
    return None


@dataclass(frozen=True)
class RawElement:
    """An Overpass node/way/relation with free-form string tags."""
    id: Any
    type: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[Coordinates] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_overpass(cls, data: Mapping[str, Any]) -> "RawElement":
        tags = data.get("tags")
        if not isinstance(tags, Mapping):
            tags = {}
        return cls(
            id=data.get("id"),
            type=str(data.get("type") or "node"),
            lat=_as_float(data.get("lat")),
            lon=_as_float(data.get("lon")),
            center=_center_substitute(data),
            tags={str(k): str(v) for k, v in tags.items()},
        )


@dataclass(frozen=True)
class Place:
    """A classified, displayable point of interest."""
    id: str
    name: str
    lat: float
    lng: float
    summary: str
    accessibility_type: tuple[AccessibilityAttribute, ...]
    osm_id: Any = None
    osm_type: Optional[str] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def dedup_key(self) -> tuple[float, float, str]:
        return (self.lat, self.lng, self.name)

    def has_attributes(self, attributes) -> bool:
        return all(attr in self.accessibility_type for attr in attributes)
