"""In-memory data sources for loaded GeoJSON layers and tests."""

import logging
from typing import Iterable

from livability.engine.proximity import haversine_m
from livability.models.geo import Amenity, AmenityCategory, GeoPoint
from livability.models.neighborhood import NeighborhoodProfile

logger = logging.getLogger(__name__)


class InMemoryAmenitySource:
    """SpatialSource over a fixed amenity collection (linear scan)."""

    def __init__(self, amenities: Iterable[Amenity] = ()):
        grouped: dict[AmenityCategory, list[Amenity]] = {}
        for amenity in amenities:
            grouped.setdefault(amenity.category, []).append(amenity)
        self._by_category: dict[AmenityCategory, tuple[Amenity, ...]] = {
            cat: tuple(items) for cat, items in grouped.items()
        }

    def __len__(self) -> int:
        return sum(len(items) for items in self._by_category.values())

    async def find_within(
        self, point: GeoPoint, radius_m: float, category: AmenityCategory
    ) -> list[Amenity]:
        candidates = self._by_category.get(category, ())
        return [a for a in candidates if haversine_m(point, a.position) <= radius_m]


class InMemoryNeighborhoodSource:
    """NeighborhoodSource over a fixed set of profiles keyed by id."""

    def __init__(self, profiles: Iterable[NeighborhoodProfile] = ()):
        self._profiles = {p.id: p for p in profiles}

    async def get_neighborhood(self, neighborhood_id: str) -> NeighborhoodProfile | None:
        profile = self._profiles.get(neighborhood_id)
        if profile is None:
            logger.debug("Neighborhood %s not found", neighborhood_id)
        return profile
