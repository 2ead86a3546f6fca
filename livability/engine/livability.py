"""Livability composite score.

Weights (0-100 total):
  Education:  20%  schools within 2 km
  Healthcare: 20%  facilities within 5 km
  Transport:  15%  taxi routes within 3 km
  Safety:     25%  safety score x 10
  Amenities:  20%  transit score
"""

from collections import Counter

from livability.engine.rounding import round_half_up
from livability.models.geo import FacilityClass, HealthFacility, School, SchoolType, TransitRoute
from livability.models.neighborhood import NeighborhoodProfile, resolve_profile
from livability.models.results import (
    EducationDetail,
    HealthcareDetail,
    NearbyAmenity,
    TransportDetail,
)

SCHOOL_RADIUS_M = 2000
HEALTH_RADIUS_M = 5000
TRANSIT_RADIUS_M = 3000
TRANSIT_ROUTE_LIMIT = 20

WEIGHTS: dict[str, float] = {
    "education": 0.2,
    "healthcare": 0.2,
    "transport": 0.15,
    "safety": 0.25,
    "amenities": 0.2,
}

SCHOOL_POINTS = 10
FULL_EDUCATION_BONUS = 20
FACILITY_POINTS = 15
HOSPITAL_BONUS = 25
CONNECTIVITY_POINTS = 2
EMERGENCY_RANGE_M = 10_000
MAJOR_DESTINATIONS = 5

NEUTRAL_SUBSCORE = 50


def _nearest(amenity, distance: int) -> NearbyAmenity:
    return NearbyAmenity(
        id=amenity.id,
        name=amenity.name,
        subtype=amenity.subtype,
        distance_m=distance,
    )


def analyze_education(schools: list[tuple[School, int]]) -> EducationDetail:
    """Schools must be ordered nearest first."""
    school_types = Counter(s.school_type.value for s, _ in schools)
    languages = Counter(s.medium for s, _ in schools if s.medium)
    has_full = (
        school_types[SchoolType.PRIMARY.value] > 0
        and school_types[SchoolType.SECONDARY.value] > 0
    )
    score = min(100, len(schools) * SCHOOL_POINTS + (FULL_EDUCATION_BONUS if has_full else 0))

    return EducationDetail(
        total_schools=len(schools),
        operational_schools=sum(1 for s, _ in schools if s.is_operational),
        school_types=dict(school_types),
        languages=dict(languages),
        has_full_education=has_full,
        education_score=score,
        nearest_school=_nearest(*schools[0]) if schools else None,
        diversity=len(languages),
    )


def analyze_healthcare(facilities: list[tuple[HealthFacility, int]]) -> HealthcareDetail:
    """Facilities must be ordered nearest first."""
    classifications = Counter(f.classification.value for f, _ in facilities)
    has_hospital = classifications[FacilityClass.HOSPITAL.value] > 0
    score = min(100, len(facilities) * FACILITY_POINTS + (HOSPITAL_BONUS if has_hospital else 0))
    nearest_distance = facilities[0][1] if facilities else None

    return HealthcareDetail(
        total_facilities=len(facilities),
        active_facilities=sum(1 for f, _ in facilities if f.is_operational),
        classifications=dict(classifications),
        has_hospital=has_hospital,
        healthcare_score=score,
        nearest_facility=_nearest(*facilities[0]) if facilities else None,
        emergency_access=has_hospital and nearest_distance is not None and nearest_distance < EMERGENCY_RANGE_M,
    )


def analyze_transport(routes: list[tuple[TransitRoute, int]]) -> TransportDetail:
    origins: list[str] = []
    destinations: list[str] = []
    for route, _ in routes:
        if route.origin and route.origin not in origins:
            origins.append(route.origin)
        if route.destination and route.destination not in destinations:
            destinations.append(route.destination)

    connectivity = len(origins) + len(destinations)
    return TransportDetail(
        total_routes=len(routes),
        unique_origins=len(origins),
        unique_destinations=len(destinations),
        connectivity=connectivity,
        transport_score=min(100, connectivity * CONNECTIVITY_POINTS),
        major_destinations=destinations[:MAJOR_DESTINATIONS],
    )


def score(
    education: float,
    healthcare: float,
    transport: float,
    neighborhood: NeighborhoodProfile,
) -> int:
    """Weighted 0-100 composite of the three access sub-scores, safety and transit."""
    profile = resolve_profile(neighborhood)
    total = (
        education * WEIGHTS["education"]
        + healthcare * WEIGHTS["healthcare"]
        + transport * WEIGHTS["transport"]
        + profile.safety_score * 10 * WEIGHTS["safety"]
        + profile.transit_score * WEIGHTS["amenities"]
    )
    return max(0, min(100, round_half_up(total)))
