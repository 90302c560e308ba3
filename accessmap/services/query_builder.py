"""Overpass QL query generation, one query per accessibility attribute."""

from typing import Optional

from accessmap.models.place import AccessibilityAttribute, BoundingBox

# Tag predicates and the element kinds each attribute is queried on.
# Braille and elderly are only inferred during classification.
ATTRIBUTE_QUERIES: dict[AccessibilityAttribute, tuple[str, tuple[str, ...]]] = {
    AccessibilityAttribute.WHEELCHAIR: ('["wheelchair"="yes"]', ("node", "way", "relation")),
    AccessibilityAttribute.TOILET: ('["amenity"="toilets"]["wheelchair"="yes"]', ("node", "way")),
    AccessibilityAttribute.ELEVATOR: ('["highway"="elevator"]', ("node", "way")),
    AccessibilityAttribute.TACTILE: ('["tactile_paving"="yes"]', ("way", "node")),
}


def has_query(attribute: AccessibilityAttribute) -> bool:
    return attribute in ATTRIBUTE_QUERIES


def build_query(
    attribute: AccessibilityAttribute,
    bounds: BoundingBox,
    timeout_seconds: int = 25,
) -> Optional[str]:
    """Build the Overpass QL query for `attribute`, or None when it has no query."""
    entry = ATTRIBUTE_QUERIES.get(attribute)
    if entry is None:
        return None
    predicate, kinds = entry
    bbox = bounds.to_overpass()
    union = "\n  ".join(f"{kind}{predicate}({bbox});" for kind in kinds)
    # `out geom` returns way/relation geometry so a center can be derived
    return f"""[out:json][timeout:{timeout_seconds}];
(
  {union}
);
out geom;"""
