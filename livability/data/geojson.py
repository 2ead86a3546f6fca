"""Parsers for the public amenity GeoJSON layers and neighborhood documents.

Layers and the property keys read from each feature:
  schools:     EMIS, NAME, SCHOOLTYPE, EDUCATIONDISTRICT, MEDIUMOFINSTRUCTION, SCHOOL_STATUS
  health:      OBJECTID, NAME, CLASSIFICATION, DISTRICT, STATUS, TELNO
  taxi routes: OBJECTID, ORGN, DSTN, SHAPE_Length
"""

import json
import logging
from pathlib import Path

from livability.config import settings
from livability.engine.safety import derive_safety_score
from livability.errors import InvalidCoordinate
from livability.models.geo import (
    Amenity,
    AmenityCategory,
    GeoPoint,
    HealthFacility,
    School,
    TransitRoute,
    parse_facility_class,
    parse_school_type,
    parse_status,
)
from livability.models.neighborhood import NeighborhoodProfile, parse_affordability

logger = logging.getLogger(__name__)


def _position(geometry: dict | None) -> GeoPoint:
    """Point for a Point geometry, or the first vertex of a line."""
    if not geometry:
        raise InvalidCoordinate("feature has no geometry")
    coords = geometry.get("coordinates")
    kind = geometry.get("type")
    if kind == "LineString" and coords:
        coords = coords[0]
    elif kind == "MultiLineString" and coords and coords[0]:
        coords = coords[0][0]
    if not isinstance(coords, (list, tuple)):
        raise InvalidCoordinate(f"unsupported geometry {kind!r}")
    return GeoPoint.from_lng_lat(coords)


def parse_school(feature: dict, strict: bool = False) -> School:
    props = feature.get("properties") or {}
    return School(
        id=str(props.get("EMIS", "")),
        name=props.get("NAME", "Unknown"),
        position=_position(feature.get("geometry")),
        status=parse_status(props.get("SCHOOL_STATUS"), strict),
        school_type=parse_school_type(props.get("SCHOOLTYPE"), strict),
        district=props.get("EDUCATIONDISTRICT"),
        medium=props.get("MEDIUMOFINSTRUCTION"),
    )


def parse_health_facility(feature: dict, strict: bool = False) -> HealthFacility:
    props = feature.get("properties") or {}
    return HealthFacility(
        id=str(props.get("OBJECTID", "")),
        name=props.get("NAME", "Unknown"),
        position=_position(feature.get("geometry")),
        status=parse_status(props.get("STATUS"), strict),
        classification=parse_facility_class(props.get("CLASSIFICATION"), strict),
        district=props.get("DISTRICT"),
        contact=props.get("TELNO"),
    )


def parse_transit_route(feature: dict, strict: bool = False) -> TransitRoute:
    props = feature.get("properties") or {}
    length = props.get("SHAPE_Length")
    return TransitRoute(
        id=str(props.get("OBJECTID", "")),
        name=f"{props.get('ORGN', '?')} - {props.get('DSTN', '?')}",
        position=_position(feature.get("geometry")),
        status=parse_status(props.get("STATUS"), strict),
        origin=props.get("ORGN"),
        destination=props.get("DSTN"),
        length=float(length) if length is not None else None,
    )


_PARSERS = {
    AmenityCategory.SCHOOL: parse_school,
    AmenityCategory.HEALTH_FACILITY: parse_health_facility,
    AmenityCategory.TRANSIT_ROUTE: parse_transit_route,
}


def parse_features(
    collection: dict,
    category: AmenityCategory,
    strict: bool | None = None,
) -> list[Amenity]:
    """Parse a FeatureCollection into amenities of one category.

    Features without a usable position are skipped. In strict mode an
    unknown type/classification/status raises UnknownCategory.
    """
    strict = settings.strict_categories if strict is None else strict
    parser = _PARSERS[category]
    amenities: list[Amenity] = []
    for feature in collection.get("features", []):
        try:
            amenities.append(parser(feature, strict))
        except (InvalidCoordinate, ValueError, TypeError) as e:
            if strict and not isinstance(e, InvalidCoordinate):
                raise
            logger.debug("Skipping %s feature: %s", category.value, e)
    return amenities


def load_features(
    path: str | Path,
    category: AmenityCategory,
    strict: bool | None = None,
) -> list[Amenity]:
    with open(path, encoding="utf-8") as f:
        collection = json.load(f)
    amenities = parse_features(collection, category, strict)
    logger.info("Loaded %d %s records from %s", len(amenities), category.value, path)
    return amenities


def _safety_score(safety: dict) -> float | None:
    score = safety.get("safetyScore")
    if score is not None:
        return float(score)
    crime_types = safety.get("crimeTypes")
    if not crime_types:
        return None
    total = sum(int(v or 0) for v in crime_types.values())
    return derive_safety_score(total, int(crime_types.get("violent") or 0))


def parse_neighborhood(doc: dict, strict: bool | None = None) -> NeighborhoodProfile:
    """Build a profile from a neighborhood document.

    Missing numeric fields stay None; the engine fills them from its
    default table. A missing safety score is derived from crime counts
    when those are present.
    """
    strict = settings.strict_categories if strict is None else strict
    coords = doc.get("coordinates") or {}
    housing = doc.get("housing") or {}
    amenities = doc.get("amenities") or {}

    avg_rent = housing.get("avgRent")
    transit = amenities.get("transitScore")
    return NeighborhoodProfile(
        id=str(doc.get("_id", doc.get("id", ""))),
        name=doc.get("name", "Unknown"),
        region=doc.get("borough") or doc.get("region"),
        position=GeoPoint(lat=coords.get("lat"), lng=coords.get("lng")),
        avg_rent=float(avg_rent) if avg_rent is not None else None,
        safety_score=_safety_score(doc.get("safety") or {}),
        transit_score=float(transit) if transit is not None else None,
        affordability_category=parse_affordability(doc.get("affordabilityCategory"), strict),
    )
