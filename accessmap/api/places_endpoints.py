"""Place fetching, search and filter endpoints."""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from accessmap.schemas import (
    AreaSummaryRead,
    FetchStateRead,
    FilterUpdate,
    SearchRequest,
)
from accessmap.core.dependencies import get_fetch_coordinator
from accessmap.services import FetchCoordinator

router = APIRouter(tags=["places"])


def _state_payload(coordinator: FetchCoordinator) -> dict:
    return FetchStateRead.build(coordinator.state, coordinator.visible_places()).model_dump(mode="json")


@router.get("/places")
async def fetch_places(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
    radius_km: Optional[float] = Query(None, gt=0.0),
    force_refresh: bool = Query(False),
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
):
    fetched = await coordinator.request_fetch(lat, lng, radius_km, force_refresh)
    payload = _state_payload(coordinator)
    payload["fetched"] = fetched
    status = "error" if coordinator.state.last_error else "ok"
    return {"status": status, "data": payload, "error": coordinator.state.last_error_message}


@router.get("/places/viewport")
async def fetch_viewport_places(
    south: float = Query(..., ge=-90.0, le=90.0),
    west: float = Query(..., ge=-180.0, le=180.0),
    north: float = Query(..., ge=-90.0, le=90.0),
    east: float = Query(..., ge=-180.0, le=180.0),
    force_refresh: bool = Query(False),
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
):
    """Fetch places inside the visible map area after a pan or zoom."""
    fetched = await coordinator.request_viewport_fetch(south, west, north, east, force_refresh)
    payload = _state_payload(coordinator)
    payload["fetched"] = fetched
    status = "error" if coordinator.state.last_error else "ok"
    return {"status": status, "data": payload, "error": coordinator.state.last_error_message}


@router.post("/places/search")
async def search_places(
    request: SearchRequest,
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
):
    fetched = await coordinator.search_area(request.query)
    payload = _state_payload(coordinator)
    payload["fetched"] = fetched
    status = "error" if coordinator.state.last_error else "ok"
    return {"status": status, "data": payload, "error": coordinator.state.last_error_message}


@router.get("/places/state")
async def get_state(coordinator: FetchCoordinator = Depends(get_fetch_coordinator)):
    return {"status": "ok", "data": _state_payload(coordinator), "error": None}


@router.get("/places/summary")
async def get_summary(coordinator: FetchCoordinator = Depends(get_fetch_coordinator)):
    summary = coordinator.area_summary()
    data = AreaSummaryRead.from_summary(summary).model_dump() if summary else None
    return {"status": "ok", "data": data, "error": None}


@router.put("/filters")
async def update_filters(
    update: FilterUpdate,
    coordinator: FetchCoordinator = Depends(get_fetch_coordinator),
):
    coordinator.set_filters(update.attributes, update.area)
    return {"status": "ok", "data": _state_payload(coordinator), "error": None}
