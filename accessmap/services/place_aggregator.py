"""Fan-out of per-attribute Overpass queries and merging into one place list."""

import asyncio
import logging
import math
from typing import Any, Callable, Iterable, Optional

from accessmap.models.place import (
    AccessibilityAttribute,
    BoundingBox,
    DEFAULT_QUERY_ATTRIBUTES,
    Place,
    RawElement,
)
from accessmap.services.element_classifier import classify
from accessmap.services.overpass_client import ThrottledRequestExecutor
from accessmap.services.query_builder import build_query

logger = logging.getLogger(__name__)

# Stable order for the fan-out, independent of set iteration order
_QUERY_ORDER = tuple(AccessibilityAttribute)


def _has_valid_coordinates(place: Place) -> bool:
    return (
        isinstance(place.lat, (int, float))
        and isinstance(place.lng, (int, float))
        and math.isfinite(place.lat)
        and math.isfinite(place.lng)
    )


def deduplicate(places: Iterable[Place]) -> list[Place]:
    """Keep the first place for each (lat, lng, name)."""
    seen = set()
    unique = []
    for place in places:
        key = place.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(place)
    return unique


class PlaceAggregator:
    def __init__(
        self,
        executor: ThrottledRequestExecutor,
        classifier: Callable[[RawElement], Optional[Place]] = classify,
        query_timeout_seconds: Optional[int] = None,
    ):
        self.executor = executor
        self.classifier = classifier
        self.query_timeout_seconds = (
            query_timeout_seconds or executor.config.query_timeout_seconds
        )

    def build_queries(
        self, bounds: BoundingBox, attributes: Iterable[AccessibilityAttribute]
    ) -> list[str]:
        requested = set(attributes) or set(DEFAULT_QUERY_ATTRIBUTES)
        queries = []
        for attribute in _QUERY_ORDER:
            if attribute not in requested:
                continue
            query = build_query(attribute, bounds, self.query_timeout_seconds)
            if query is not None:
                queries.append(query)
        return queries

    async def aggregate(
        self,
        bounds: BoundingBox,
        requested_attributes: Iterable[AccessibilityAttribute] = (),
    ) -> list[Place]:
        """
        Fetch and classify every place in `bounds` for the requested attributes.

        All queries run concurrently; the first failing query fails the whole
        aggregation with its typed error.
        """
        queries = self.build_queries(bounds, requested_attributes)
        logger.info(f"Fetching accessible places with {len(queries)} queries for {bounds.to_overpass()}")

        responses = await asyncio.gather(*(self.executor.execute(q) for q in queries))

        places = []
        for response in responses:
            for raw in self._elements(response):
                place = self.classifier(RawElement.from_overpass(raw))
                if place is None or not _has_valid_coordinates(place):
                    continue
                if not place.accessibility_type:
                    continue
                places.append(place)

        unique = deduplicate(places)
        logger.info(f"Aggregated {len(unique)} places ({len(places) - len(unique)} duplicates removed)")
        return unique

    @staticmethod
    def _elements(response: dict[str, Any]) -> list[dict[str, Any]]:
        elements = response.get("elements") or []
        if not isinstance(elements, list):
            return []
        return [e for e in elements if isinstance(e, dict)]
