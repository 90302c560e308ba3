"""Client-side filtering of an already fetched place set."""

from typing import Iterable, Optional, Sequence

from accessmap.models.fetch_state import AreaSummary
from accessmap.models.place import AccessibilityAttribute, Place


def filter_places(
    places: Sequence[Place], active: Iterable[AccessibilityAttribute]
) -> list[Place]:
    """Places carrying every active attribute; all places when none is active."""
    active = list(active)
    if not active:
        return list(places)
    return [p for p in places if p.has_attributes(active)]


def summarize_area(places: Sequence[Place], area: str) -> Optional[AreaSummary]:
    term = (area or "").strip()
    if not term:
        return None
    matching = [p for p in places if term.lower() in p.name.lower()]

    def count(attribute):
        return sum(1 for p in matching if attribute in p.accessibility_type)

    return AreaSummary(
        area=term,
        total=len(matching),
        wheelchair=count(AccessibilityAttribute.WHEELCHAIR),
        toilet=count(AccessibilityAttribute.TOILET),
        elevator=count(AccessibilityAttribute.ELEVATOR),
    )
