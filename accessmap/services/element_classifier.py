"""
Element classification.

Turns a raw Overpass element into a Place: accessibility labels are derived
additively from its tags, then coordinates, summary, name and id are
resolved. Elements without any usable coordinates are dropped.
"""

import logging
from typing import Mapping, Optional

from accessmap.models.place import AccessibilityAttribute, Place, RawElement

logger = logging.getLogger(__name__)

A = AccessibilityAttribute

# Summary phrases, in display order. Elderly-friendliness has no phrase.
SUMMARY_PHRASES: tuple[tuple[AccessibilityAttribute, str], ...] = (
    (A.WHEELCHAIR, "Wheelchair accessible"),
    (A.TOILET, "Accessible toilets"),
    (A.ELEVATOR, "Elevator available"),
    (A.TACTILE, "Tactile paving"),
    (A.BRAILLE, "Braille signage"),
)

DEFAULT_SUMMARY = "Accessibility features available"
DEFAULT_NAME = "Unnamed Location"

# TODO: the wheelchair fallback mislabels places with no real wheelchair access;
# drop it once the map can render places without a primary attribute.
FALLBACK_ATTRIBUTES: tuple[AccessibilityAttribute, ...] = (A.WHEELCHAIR,)


def detect_attributes(tags: Mapping[str, str]) -> list[AccessibilityAttribute]:
    attributes = []
    if tags.get("wheelchair") == "yes":
        attributes.append(A.WHEELCHAIR)
    if tags.get("amenity") == "toilets" and tags.get("wheelchair") == "yes":
        attributes.append(A.TOILET)
    if tags.get("highway") == "elevator":
        attributes.append(A.ELEVATOR)
    if tags.get("tactile_paving") == "yes":
        attributes.append(A.TACTILE)
    if tags.get("braille") == "yes" or "braille" in tags.get("description", "").lower():
        attributes.append(A.BRAILLE)
    if any(tags.get(key) == "yes" for key in ("bench", "shelter", "covered")):
        attributes.append(A.ELDERLY)
    return attributes


def build_summary(attributes) -> str:
    phrases = [phrase for attr, phrase in SUMMARY_PHRASES if attr in attributes]
    return ", ".join(phrases) if phrases else DEFAULT_SUMMARY


def resolve_name(tags: Mapping[str, str]) -> str:
    return tags.get("name") or tags.get("amenity") or tags.get("highway") or DEFAULT_NAME


def resolve_coordinates(element: RawElement) -> Optional[tuple[float, float]]:
    if element.lat is not None and element.lon is not None:
        return element.lat, element.lon
    if element.center is not None:
        return element.center.latitude, element.center.longitude
    return None


def classify(element: RawElement) -> Optional[Place]:
    """Classify one element; returns None when it has no usable coordinates."""
    tags = element.tags or {}
    attributes = detect_attributes(tags)

    coordinates = resolve_coordinates(element)
    if coordinates is None:
        logger.debug(f"Dropping {element.type} {element.id}: no coordinates")
        return None
    lat, lng = coordinates

    summary = build_summary(attributes)
    if not attributes:
        attributes = list(FALLBACK_ATTRIBUTES)

    return Place(
        id=f"{element.type}_{element.id}",
        name=resolve_name(tags),
        lat=lat,
        lng=lng,
        summary=summary,
        accessibility_type=tuple(attributes),
        osm_id=element.id,
        osm_type=element.type,
        tags=dict(tags),
    )
