"""
Bounding box calculation.

Converts a center point and radius, a map viewport, or a Nominatim search
result into a BoundingBox.
"""

import math
from typing import Any, Mapping, Optional

from accessmap.config.settings import MAX_DEGREE_DELTA, NAMED_PLACE_BUFFER_DEG
from accessmap.core.exceptions import InvalidLocationError
from accessmap.models.place import BoundingBox

KM_PER_DEGREE = 111.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _parse_float(value: Any) -> Optional[float]:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


class BoundingBoxCalculator:
    def __init__(
        self,
        max_degree_delta: float = MAX_DEGREE_DELTA,
        named_place_buffer_deg: float = NAMED_PLACE_BUFFER_DEG,
    ):
        self.max_degree_delta = max_degree_delta
        self.named_place_buffer_deg = named_place_buffer_deg

    def from_center(self, lat: float, lng: float, radius_km: float) -> BoundingBox:
        """
        Build a box of roughly `radius_km` around a point.

        Near the poles the longitude delta blows up; any delta above
        `max_degree_delta` is treated as degenerate and the box is clamped to
        the full longitude range instead.
        """
        if not all(math.isfinite(v) for v in (lat, lng, radius_km)):
            raise InvalidLocationError(
                "Coordinates and radius must be finite numbers",
                details={"lat": lat, "lng": lng, "radius_km": radius_km},
            )
        if radius_km <= 0:
            raise InvalidLocationError(
                "Search radius must be positive", details={"radius_km": radius_km}
            )
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise InvalidLocationError(
                "Coordinates are out of range", details={"lat": lat, "lng": lng}
            )

        lat_delta = radius_km / KM_PER_DEGREE
        cos_lat = math.cos(math.radians(lat))
        if cos_lat <= 1e-12:
            lng_delta = math.inf
        else:
            lng_delta = radius_km / (KM_PER_DEGREE * cos_lat)

        south = _clamp(lat - min(lat_delta, self.max_degree_delta), -90.0, 90.0)
        north = _clamp(lat + min(lat_delta, self.max_degree_delta), -90.0, 90.0)
        if lng_delta > self.max_degree_delta:
            west, east = -180.0, 180.0
        else:
            west = _clamp(lng - lng_delta, -180.0, 180.0)
            east = _clamp(lng + lng_delta, -180.0, 180.0)

        try:
            return BoundingBox(south=south, north=north, west=west, east=east)
        except ValueError as e:
            raise InvalidLocationError(str(e), details={"lat": lat, "lng": lng}) from e

    def from_corners(self, south: float, west: float, north: float, east: float) -> BoundingBox:
        """Bounds of a visible map viewport (south-west and north-east corners)."""
        try:
            return BoundingBox(south=south, north=north, west=west, east=east)
        except ValueError as e:
            raise InvalidLocationError(str(e)) from e

    def from_named_place_lookup(self, result: Optional[Mapping[str, Any]]) -> BoundingBox:
        """
        Bounds for a Nominatim search result.

        The reported `boundingbox` ([south, north, west, east] as strings) wins
        when it is well formed; otherwise a small buffer is put around the
        reported point.
        """
        if not result:
            raise InvalidLocationError()

        raw_box = result.get("boundingbox")
        if isinstance(raw_box, (list, tuple)) and len(raw_box) == 4:
            parsed = [_parse_float(v) for v in raw_box]
            if all(v is not None for v in parsed):
                south, north, west, east = parsed
                try:
                    return BoundingBox(south=south, north=north, west=west, east=east)
                except ValueError:
                    pass

        lat = _parse_float(result.get("lat"))
        lng = _parse_float(result.get("lon"))
        if lat is None or lng is None:
            raise InvalidLocationError(details={"result": dict(result)})

        buffer = self.named_place_buffer_deg
        return BoundingBox(
            south=lat - buffer,
            north=lat + buffer,
            west=lng - buffer,
            east=lng + buffer,
        )
