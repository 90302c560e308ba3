from .place import (
    PlaceRead,
    FetchStateRead,
    SearchRequest,
    FilterUpdate,
    BoundingBoxRead,
    LocationRead,
    AreaSummaryRead,
)

__all__ = [
    "PlaceRead",
    "FetchStateRead",
    "SearchRequest",
    "FilterUpdate",
    "BoundingBoxRead",
    "LocationRead",
    "AreaSummaryRead",
]
