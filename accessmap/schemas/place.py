from pydantic import BaseModel, Field

from accessmap.core.exceptions import ErrorCode
from accessmap.models.fetch_state import AreaSummary, FetchState
from accessmap.models.location import LocationResult
from accessmap.models.place import AccessibilityAttribute, BoundingBox, Place


class PlaceRead(BaseModel):
    id: str
    name: str
    lat: float
    lng: float
    summary: str
    accessibility_type: list[AccessibilityAttribute]
    osm_id: int | str | None = None
    osm_type: str | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_place(cls, place: Place) -> "PlaceRead":
        return cls(
            id=place.id,
            name=place.name,
            lat=place.lat,
            lng=place.lng,
            summary=place.summary,
            accessibility_type=list(place.accessibility_type),
            osm_id=place.osm_id,
            osm_type=place.osm_type,
            tags=dict(place.tags),
        )


class FetchStateRead(BaseModel):
    is_loading: bool
    last_error: ErrorCode | None = None
    last_error_message: str | None = None
    last_fetch_center: tuple[float, float] | None = None
    total_places: int
    places: list[PlaceRead]

    @classmethod
    def build(cls, state: FetchState, visible: list[Place]) -> "FetchStateRead":
        return cls(
            is_loading=state.is_loading,
            last_error=state.last_error,
            last_error_message=state.last_error_message,
            last_fetch_center=state.last_fetch_center,
            total_places=len(state.current_places),
            places=[PlaceRead.from_place(p) for p in visible],
        )


class SearchRequest(BaseModel):
    query: str


class FilterUpdate(BaseModel):
    attributes: list[AccessibilityAttribute] = Field(default_factory=list)
    area: str = ""


class BoundingBoxRead(BaseModel):
    south: float
    north: float
    west: float
    east: float

    @classmethod
    def from_bounds(cls, bounds: BoundingBox) -> "BoundingBoxRead":
        return cls(**bounds.to_dict())


class LocationRead(BaseModel):
    type: str
    lat: float
    lng: float
    name: str

    @classmethod
    def from_result(cls, result: LocationResult) -> "LocationRead":
        return cls(**result.to_dict())


class AreaSummaryRead(BaseModel):
    area: str
    total: int
    wheelchair: int
    toilet: int
    elevator: int

    @classmethod
    def from_summary(cls, summary: AreaSummary) -> "AreaSummaryRead":
        return cls(
            area=summary.area,
            total=summary.total,
            wheelchair=summary.wheelchair,
            toilet=summary.toilet,
            elevator=summary.elevator,
        )
