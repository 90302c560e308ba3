"""Location models shared by the geocoding and geolocation services."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


class LocationKind(str, Enum):
    """How a user location was obtained."""
    PRECISE = "precise"
    ESTIMATED = "estimated"
    DEFAULT = "default"


@dataclass(frozen=True)
class LocationResult:
    """Resolved user location with a human-readable name."""
    kind: LocationKind
    latitude: float
    longitude: float
    name: str

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "lat": self.latitude,
            "lng": self.longitude,
            "name": self.name,
        }


@dataclass(frozen=True)
class GeolocationOptions:
    """Options handed to a position provider, mirroring the browser geolocation API."""
    enable_high_accuracy: bool = True
    timeout_seconds: float = 10.0
    maximum_age_seconds: int = 300
