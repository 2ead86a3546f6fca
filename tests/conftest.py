"""Shared fixtures for engine and data tests.

Fixture neighborhood: Observatory, Cape Town (Southern Suburbs), with a
small hand-placed amenity set around it.
"""

import math
import random

import pytest

from livability.data.memory import InMemoryAmenitySource
from livability.engine.proximity import ProximityIndex
from livability.errors import MissingDependency
from livability.models.geo import (
    AmenityStatus,
    FacilityClass,
    GeoPoint,
    HealthFacility,
    School,
    SchoolType,
    TransitRoute,
)
from livability.models.neighborhood import AffordabilityCategory, NeighborhoodProfile

CENTER = GeoPoint(lat=-33.9380, lng=18.4720)


def offset(point: GeoPoint, north_m: float = 0.0, east_m: float = 0.0) -> GeoPoint:
    """Approximate point displaced by meters (fine for a few km)."""
    dlat = north_m / 111_320
    dlng = east_m / (111_320 * math.cos(math.radians(point.lat)))
    return GeoPoint(lat=point.lat + dlat, lng=point.lng + dlng)


class FailingSource:
    """SpatialSource that is always unreachable."""

    def __init__(self, exc: Exception | None = None):
        self.exc = exc or MissingDependency("connection refused")

    async def find_within(self, point, radius_m, category):
        raise self.exc


class PartialSource:
    """Delegates to an inner source but fails for chosen categories."""

    def __init__(self, inner, failing):
        self.inner = inner
        self.failing = set(failing)

    async def find_within(self, point, radius_m, category):
        if category in self.failing:
            raise ConnectionError(f"{category.value} layer offline")
        return await self.inner.find_within(point, radius_m, category)


@pytest.fixture
def center() -> GeoPoint:
    return CENTER


@pytest.fixture
def amenities():
    """Two primary, one secondary, one combined school; a hospital and a clinic; three routes."""
    return [
        School(id="s1", name="Observatory Primary", position=offset(CENTER, 300, 0),
               school_type=SchoolType.PRIMARY, medium="English"),
        School(id="s2", name="Groote Schuur High", position=offset(CENTER, 0, 900),
               school_type=SchoolType.SECONDARY, medium="English"),
        School(id="s3", name="Mowbray Primary", position=offset(CENTER, 1500, 0),
               school_type=SchoolType.PRIMARY, medium="Afrikaans",
               status=AmenityStatus.INACTIVE),
        School(id="s4", name="Rondebosch Combined", position=offset(CENTER, -1200, 0),
               school_type=SchoolType.COMBINED, medium="isiXhosa"),
        # Outside the 2 km school radius
        School(id="s5", name="Far Away Secondary", position=offset(CENTER, 0, 4000),
               school_type=SchoolType.SECONDARY),
        HealthFacility(id="h1", name="Groote Schuur Hospital", position=offset(CENTER, 600, 400),
                       classification=FacilityClass.HOSPITAL),
        HealthFacility(id="h2", name="Woodstock Clinic", position=offset(CENTER, 3000, 0),
                       classification=FacilityClass.CLINIC),
        TransitRoute(id="t1", name="Obs - Town", position=offset(CENTER, 100, 100),
                     origin="Observatory", destination="Cape Town CBD"),
        TransitRoute(id="t2", name="Obs - Claremont", position=offset(CENTER, -200, 0),
                     origin="Observatory", destination="Claremont"),
        TransitRoute(id="t3", name="Mowbray - Town", position=offset(CENTER, 1800, 0),
                     origin="Mowbray", destination="Cape Town CBD"),
    ]


@pytest.fixture
def source(amenities) -> InMemoryAmenitySource:
    return InMemoryAmenitySource(amenities)


@pytest.fixture
def index(source) -> ProximityIndex:
    return ProximityIndex(source)


@pytest.fixture
def empty_index() -> ProximityIndex:
    return ProximityIndex(InMemoryAmenitySource())


@pytest.fixture
def failing_index() -> ProximityIndex:
    return ProximityIndex(FailingSource())


@pytest.fixture
def observatory() -> NeighborhoodProfile:
    return NeighborhoodProfile(
        id="obs",
        name="Observatory",
        region="Southern Suburbs",
        position=CENTER,
        avg_rent=14_500,
        safety_score=6.5,
        transit_score=72,
        affordability_category=AffordabilityCategory.AFFORDABLE,
    )


@pytest.fixture
def gentrifying() -> NeighborhoodProfile:
    """Cheap, safe and well connected."""
    return NeighborhoodProfile(
        id="wood",
        name="Woodstock",
        region="City Bowl",
        position=CENTER,
        avg_rent=15_000,
        safety_score=8,
        transit_score=75,
        affordability_category=AffordabilityCategory.MODERATE,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def offset_point():
    return offset


@pytest.fixture
def partial_index(source):
    """Factory for an index whose source fails for the given categories."""
    def make(*failing):
        return ProximityIndex(PartialSource(source, failing))
    return make

