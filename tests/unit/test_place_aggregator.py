"""
Unit tests for per-attribute fan-out, merging and deduplication
"""
import httpx
import pytest

from accessmap.core.exceptions import RateLimitError, UpstreamError
from accessmap.models.place import AccessibilityAttribute, BoundingBox
from accessmap.services.overpass_client import ThrottledRequestExecutor
from accessmap.services.place_aggregator import PlaceAggregator
from tests.fakes import FakeOverpass, node, way

BOUNDS = BoundingBox(south=28.5, north=28.7, west=77.1, east=77.3)

WHEELCHAIR = '"wheelchair"="yes"'
TOILET = '"amenity"="toilets"'
ELEVATOR = '"highway"="elevator"'
TACTILE = '"tactile_paving"="yes"'


def _aggregator(fake, overpass_settings):
    return PlaceAggregator(ThrottledRequestExecutor(overpass_settings, transport=fake.transport))


@pytest.mark.asyncio
async def test_empty_request_uses_default_attributes(overpass_settings):
    fake = FakeOverpass()
    await _aggregator(fake, overpass_settings).aggregate(BOUNDS, set())

    assert len(fake.queries) == 4
    joined = "\n".join(fake.queries)
    for marker in (WHEELCHAIR, TOILET, ELEVATOR, TACTILE):
        assert marker in joined


@pytest.mark.asyncio
async def test_inferred_attributes_issue_no_queries(overpass_settings):
    fake = FakeOverpass()
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.BRAILLE, AccessibilityAttribute.ELDERLY}
    )
    assert fake.queries == []
    assert places == []


@pytest.mark.asyncio
async def test_only_requested_attributes_are_queried(overpass_settings):
    fake = FakeOverpass({ELEVATOR: [node(1, 28.6, 77.2, highway="elevator")]})
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.ELEVATOR, AccessibilityAttribute.BRAILLE}
    )
    assert len(fake.queries) == 1
    assert [p.id for p in places] == ["node_1"]


@pytest.mark.asyncio
async def test_duplicates_collapse_to_first_occurrence(overpass_settings):
    fake = FakeOverpass({
        WHEELCHAIR: [
            node(1, 28.6, 77.2, name="Cafe", wheelchair="yes"),
            node(2, 28.6, 77.2, name="Cafe", wheelchair="yes"),
        ],
    })
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.WHEELCHAIR}
    )
    assert len(places) == 1
    assert places[0].id == "node_1"


@pytest.mark.asyncio
async def test_same_element_from_two_queries_is_merged(overpass_settings):
    toilet = node(7, 28.61, 77.21, amenity="toilets", wheelchair="yes")
    fake = FakeOverpass({WHEELCHAIR: [toilet], TOILET: [toilet]})
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.WHEELCHAIR, AccessibilityAttribute.TOILET}
    )
    assert len(fake.queries) == 2
    assert len(places) == 1
    assert [a.value for a in places[0].accessibility_type] == ["wheelchair", "toilet"]


@pytest.mark.asyncio
async def test_same_name_at_different_points_is_kept(overpass_settings):
    fake = FakeOverpass({
        ELEVATOR: [
            node(1, 28.60, 77.20, highway="elevator"),
            node(2, 28.61, 77.20, highway="elevator"),
        ],
    })
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.ELEVATOR}
    )
    assert [p.name for p in places] == ["elevator", "elevator"]


@pytest.mark.asyncio
async def test_invalid_elements_are_dropped(overpass_settings):
    fake = FakeOverpass({
        TACTILE: [
            {"type": "relation", "id": 3, "tags": {"tactile_paving": "yes"}},
            {"type": "node", "id": 4, "lat": "not-a-number", "lon": 77.2, "tags": {}},
            "garbage",
            way(5, 28.65, 77.25, tactile_paving="yes"),
        ],
    })
    places = await _aggregator(fake, overpass_settings).aggregate(
        BOUNDS, {AccessibilityAttribute.TACTILE}
    )
    assert [p.id for p in places] == ["way_5"]


@pytest.mark.asyncio
async def test_any_failing_query_fails_the_aggregation(overpass_settings):
    fake = FakeOverpass({
        WHEELCHAIR: [node(1, 28.6, 77.2, wheelchair="yes")],
        ELEVATOR: 429,
    })
    with pytest.raises(RateLimitError):
        await _aggregator(fake, overpass_settings).aggregate(BOUNDS, set())


@pytest.mark.asyncio
async def test_upstream_error_propagates(overpass_settings):
    fake = FakeOverpass({TACTILE: 500})
    with pytest.raises(UpstreamError):
        await _aggregator(fake, overpass_settings).aggregate(
            BOUNDS, {AccessibilityAttribute.TACTILE}
        )


@pytest.mark.asyncio
async def test_response_without_elements_yields_nothing(overpass_settings):
    executor = ThrottledRequestExecutor(
        overpass_settings,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"remark": "x"})),
    )
    places = await PlaceAggregator(executor).aggregate(BOUNDS, {AccessibilityAttribute.WHEELCHAIR})
    assert places == []
