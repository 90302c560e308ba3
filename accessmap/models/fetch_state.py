"""State held by the fetch coordinator for one session."""

from dataclasses import dataclass, field
from typing import Optional

from accessmap.core.exceptions import ErrorCode
from accessmap.models.place import AccessibilityAttribute, Place


@dataclass
class FetchState:
    current_places: tuple[Place, ...] = ()
    is_loading: bool = False
    last_error: Optional[ErrorCode] = None
    last_error_message: Optional[str] = None
    last_fetch_center: Optional[tuple[float, float]] = None


@dataclass
class FilterState:
    """Active attribute toggles plus the free-text area term."""
    attributes: frozenset[AccessibilityAttribute] = field(default_factory=frozenset)
    area: str = ""


@dataclass(frozen=True)
class AreaSummary:
    area: str
    total: int
    wheelchair: int
    toilet: int
    elevator: int
