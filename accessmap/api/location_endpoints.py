"""User location and place-name lookup endpoints."""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from accessmap.core.dependencies import get_fetch_coordinator, get_service_container
from accessmap.schemas import BoundingBoxRead, LocationRead
from accessmap.services import FetchCoordinator, StaticPositionProvider

router = APIRouter(tags=["location"])


@router.get("/location")
async def detect_location(
    lat: Optional[float] = Query(None, ge=-90.0, le=90.0),
    lng: Optional[float] = Query(None, ge=-180.0, le=180.0),
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
):
    """
    Resolve the user's location.

    `lat`/`lng` carry the browser-reported position when the user shared it;
    without them the IP estimate and then the default location are used.
    """
    result = await coordinator.locate(StaticPositionProvider(lat, lng))
    return {"status": "ok", "data": LocationRead.from_result(result).model_dump(), "error": None}


@router.get("/geocode")
async def geocode_place(q: str = Query(...), container=Depends(get_service_container)):
    result = await container.geocoder.search(q)
    bounds = container.calculator.from_named_place_lookup(result)
    return {"status": "ok", "data": BoundingBoxRead.from_bounds(bounds).model_dump(), "error": None}
