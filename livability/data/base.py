"""Protocol definitions for data sources.

The engine reads amenities through SpatialSource only. NeighborhoodSource is
what callers use to load a profile before invoking the engine.
"""

from typing import Protocol, runtime_checkable

from livability.models.geo import Amenity, AmenityCategory, GeoPoint
from livability.models.neighborhood import NeighborhoodProfile


@runtime_checkable
class SpatialSource(Protocol):
    async def find_within(
        self, point: GeoPoint, radius_m: float, category: AmenityCategory
    ) -> list[Amenity]:
        """Return amenities of a category within radius_m of point, in any order."""
        ...


@runtime_checkable
class NeighborhoodSource(Protocol):
    async def get_neighborhood(self, neighborhood_id: str) -> NeighborhoodProfile | None:
        """Fetch a neighborhood profile by id."""
        ...
