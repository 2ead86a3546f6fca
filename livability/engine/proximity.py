"""Great-circle proximity lookups over a spatial source.

Distances are haversine on a sphere of radius 6,371 km, rounded to the meter.
"""

import logging
import math
from typing import AsyncIterator

from livability.data.base import SpatialSource
from livability.engine.rounding import round_half_up
from livability.errors import InvalidCoordinate, MissingDependency
from livability.models.geo import Amenity, AmenityCategory, GeoPoint, validate_coordinate

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000


def haversine_m(a: GeoPoint, b: GeoPoint) -> int:
    """Great-circle distance between two points in whole meters."""
    validate_coordinate(a.lat, a.lng)
    validate_coordinate(b.lat, b.lng)

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding error can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round_half_up(EARTH_RADIUS_M * c)


class ProximityIndex:
    """Nearest-first amenity lookups backed by a SpatialSource.

    Holds no per-call state, so one instance can serve concurrent requests.
    """

    def __init__(self, source: SpatialSource):
        self.source = source

    async def nearby(
        self,
        center: GeoPoint,
        radius_m: float,
        category: AmenityCategory,
        limit: int | None = None,
    ) -> AsyncIterator[tuple[Amenity, int]]:
        """Yield (amenity, distance_m) pairs within radius_m, nearest first.

        Raises InvalidCoordinate for an out-of-range center and
        MissingDependency if the source cannot be read.
        """
        validate_coordinate(center.lat, center.lng)
        if radius_m < 0:
            raise ValueError(f"radius must be >= 0, got {radius_m}")

        try:
            found = await self.source.find_within(center, radius_m, category)
        except (InvalidCoordinate, MissingDependency):
            raise
        except Exception as e:
            raise MissingDependency(f"spatial source failed for {category.value}: {e}") from e

        ranked: list[tuple[int, int, Amenity]] = []
        for seq, amenity in enumerate(found):
            if amenity.category != category:
                continue
            try:
                distance = haversine_m(center, amenity.position)
            except InvalidCoordinate:
                logger.debug("Skipping %s with invalid position", amenity.id)
                continue
            if distance <= radius_m:
                ranked.append((distance, seq, amenity))
        # seq keeps equal distances in source order
        ranked.sort(key=lambda item: (item[0], item[1]))

        if limit is not None:
            ranked = ranked[:limit]
        for distance, _, amenity in ranked:
            yield amenity, distance

    async def collect(
        self,
        center: GeoPoint,
        radius_m: float,
        category: AmenityCategory,
        limit: int | None = None,
    ) -> list[tuple[Amenity, int]]:
        """Materialize nearby() into a list."""
        return [pair async for pair in self.nearby(center, radius_m, category, limit)]
