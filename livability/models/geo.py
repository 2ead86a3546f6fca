"""Geospatial value types and amenity records."""

import logging
from dataclasses import dataclass
from enum import Enum

from livability.errors import InvalidCoordinate, UnknownCategory

logger = logging.getLogger(__name__)


def validate_coordinate(lat: float, lng: float) -> None:
    """Raise InvalidCoordinate unless lat is in [-90, 90] and lng in [-180, 180]."""
    try:
        lat_ok = -90.0 <= float(lat) <= 90.0
        lng_ok = -180.0 <= float(lng) <= 180.0
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"non-numeric coordinate ({lat!r}, {lng!r})") from None
    # NaN fails both comparisons
    if not (lat_ok and lng_ok):
        raise InvalidCoordinate(f"coordinate out of range: lat={lat}, lng={lng}")


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        validate_coordinate(self.lat, self.lng)

    @classmethod
    def from_lng_lat(cls, coordinates: list[float] | tuple[float, float]) -> "GeoPoint":
        """Build from a GeoJSON-ordered [lng, lat] pair."""
        if len(coordinates) < 2:
            raise InvalidCoordinate(f"expected [lng, lat], got {coordinates!r}")
        return cls(lat=float(coordinates[1]), lng=float(coordinates[0]))


class AmenityCategory(Enum):
    SCHOOL = "school"
    HEALTH_FACILITY = "health_facility"
    TRANSIT_ROUTE = "transit_route"


class AmenityStatus(Enum):
    OPERATIONAL = "operational"
    INACTIVE = "inactive"


class SchoolType(Enum):
    PRIMARY = "Primary School"
    SECONDARY = "Secondary School"
    COMBINED = "Combined School"
    INTERMEDIATE = "Intermediate School"
    OTHER = "Other"


class FacilityClass(Enum):
    HOSPITAL = "Hospital"
    CLINIC = "Clinic"
    OTHER = "Other"


_OPERATIONAL_STATUSES = {"open", "active", "operational"}
_INACTIVE_STATUSES = {"closed", "inactive", "non-operational", "decommissioned"}


def _parse_enum(enum_cls: type[Enum], raw: str | None, fallback: Enum, strict: bool) -> Enum:
    if raw is None:
        return fallback
    text = str(raw).strip()
    for member in enum_cls:
        if member.value.lower() == text.lower():
            return member
    if strict:
        raise UnknownCategory(f"unknown {enum_cls.__name__}: {raw!r}")
    logger.debug("Unmapped %s %r, using %s", enum_cls.__name__, raw, fallback.name)
    return fallback


def parse_school_type(raw: str | None, strict: bool = False) -> SchoolType:
    return _parse_enum(SchoolType, raw, SchoolType.OTHER, strict)


def parse_facility_class(raw: str | None, strict: bool = False) -> FacilityClass:
    return _parse_enum(FacilityClass, raw, FacilityClass.OTHER, strict)


def parse_status(raw: str | None, strict: bool = False) -> AmenityStatus:
    """Map source status strings ("Open", "Active", ...) to AmenityStatus.

    A missing status is treated as operational: sources like OpenStreetMap
    only list features that exist.
    """
    if raw is None:
        return AmenityStatus.OPERATIONAL
    text = str(raw).strip().lower()
    if text in _OPERATIONAL_STATUSES:
        return AmenityStatus.OPERATIONAL
    if text in _INACTIVE_STATUSES:
        return AmenityStatus.INACTIVE
    if strict:
        raise UnknownCategory(f"unknown amenity status: {raw!r}")
    logger.debug("Unmapped amenity status %r, treating as inactive", raw)
    return AmenityStatus.INACTIVE


@dataclass(frozen=True)
class Amenity:
    id: str
    name: str
    position: GeoPoint
    status: AmenityStatus = AmenityStatus.OPERATIONAL

    category = None  # set per subclass

    @property
    def subtype(self) -> str:
        return "Unknown"

    @property
    def is_operational(self) -> bool:
        return self.status == AmenityStatus.OPERATIONAL


@dataclass(frozen=True)
class School(Amenity):
    school_type: SchoolType = SchoolType.OTHER
    district: str | None = None
    medium: str | None = None  # language of instruction

    category = AmenityCategory.SCHOOL

    @property
    def subtype(self) -> str:
        return self.school_type.value


@dataclass(frozen=True)
class HealthFacility(Amenity):
    classification: FacilityClass = FacilityClass.OTHER
    district: str | None = None
    contact: str | None = None

    category = AmenityCategory.HEALTH_FACILITY

    @property
    def subtype(self) -> str:
        return self.classification.value


@dataclass(frozen=True)
class TransitRoute(Amenity):
    """A minibus-taxi route; position is the first vertex of its path."""
    origin: str | None = None
    destination: str | None = None
    length: float | None = None

    category = AmenityCategory.TRANSIT_ROUTE

    @property
    def subtype(self) -> str:
        return "Taxi Route"
