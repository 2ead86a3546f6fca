"""OpenStreetMap Overpass API as a spatial source.

Schools:          amenity=school
Health facilities: amenity=hospital|clinic|doctors
Transit routes:   route=bus|share_taxi relations (from/to tags)

Free, no API key required. Failures raise MissingDependency so the engine
can fall back to neutral factors.
"""

import logging

import httpx

from livability.config import settings
from livability.errors import InvalidCoordinate, MissingDependency
from livability.models.geo import (
    Amenity,
    AmenityCategory,
    FacilityClass,
    GeoPoint,
    HealthFacility,
    School,
    SchoolType,
    TransitRoute,
)

logger = logging.getLogger(__name__)

_SELECTORS = {
    AmenityCategory.SCHOOL: ['nwr["amenity"="school"]'],
    AmenityCategory.HEALTH_FACILITY: ['nwr["amenity"~"^(hospital|clinic|doctors)$"]'],
    AmenityCategory.TRANSIT_ROUTE: ['relation["route"~"^(bus|share_taxi)$"]'],
}

# ISCED level tag -> school type
_ISCED_TYPES = {
    "1": SchoolType.PRIMARY,
    "2": SchoolType.SECONDARY,
    "3": SchoolType.SECONDARY,
    "2;3": SchoolType.SECONDARY,
    "1;2": SchoolType.COMBINED,
    "1;2;3": SchoolType.COMBINED,
}


def build_query(point: GeoPoint, radius_m: float, category: AmenityCategory, timeout: int = 10) -> str:
    around = f"(around:{int(radius_m)},{point.lat},{point.lng})"
    statements = "\n".join(f"  {sel}{around};" for sel in _SELECTORS[category])
    return f"[out:json][timeout:{timeout}];\n(\n{statements}\n);\nout center tags;"


def _element_position(element: dict) -> GeoPoint:
    if "lat" in element and "lon" in element:
        return GeoPoint(lat=element["lat"], lng=element["lon"])
    center = element.get("center") or {}
    return GeoPoint(lat=center.get("lat"), lng=center.get("lon"))


def _to_amenity(element: dict, category: AmenityCategory) -> Amenity:
    tags = element.get("tags") or {}
    common = dict(
        id=f"osm:{element.get('type', 'node')}/{element.get('id', '')}",
        name=tags.get("name", "Unknown"),
        position=_element_position(element),
    )
    if category == AmenityCategory.SCHOOL:
        return School(
            **common,
            school_type=_ISCED_TYPES.get(tags.get("isced:level", ""), SchoolType.OTHER),
            medium=tags.get("language"),
        )
    if category == AmenityCategory.HEALTH_FACILITY:
        kind = tags.get("amenity")
        classification = (
            FacilityClass.HOSPITAL if kind == "hospital"
            else FacilityClass.CLINIC if kind in ("clinic", "doctors")
            else FacilityClass.OTHER
        )
        return HealthFacility(**common, classification=classification, contact=tags.get("phone"))
    return TransitRoute(**common, origin=tags.get("from"), destination=tags.get("to"))


class OverpassAmenitySource:
    """SpatialSource that queries Overpass once per lookup."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or settings.overpass_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._transport = transport

    async def find_within(
        self, point: GeoPoint, radius_m: float, category: AmenityCategory
    ) -> list[Amenity]:
        query = build_query(point, radius_m, category)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, data={"data": query})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise MissingDependency(f"Overpass request failed: {e}") from e

        amenities: list[Amenity] = []
        for element in data.get("elements", []):
            try:
                amenities.append(_to_amenity(element, category))
            except InvalidCoordinate:
                logger.debug("Overpass element %s has no position", element.get("id"))
        logger.debug("Overpass returned %d %s elements", len(amenities), category.value)
        return amenities
