"""Predictive factor derivation for a neighborhood.

Factors (all bounded):
  infrastructure_score:    0-1     school and health facility density
  safety_trend:            ±0.2    tier of the current safety score
  education_factor:        0-1     quality-weighted nearby schools
  transport_factor:        0-0.15  tier of the transit score
  economic_growth:         0-1     annual growth by region
  supply_demand:           0-1     annual demand pressure by affordability
  gentrification_pressure: 0-1     cheap + safe + connected + built up

The weights and tables are hand-tuned heuristics, not fitted to price data.
"""

import logging

from livability.engine.proximity import ProximityIndex
from livability.errors import MissingDependency
from livability.models.geo import AmenityCategory, School, SchoolType
from livability.models.neighborhood import (
    AffordabilityCategory,
    NeighborhoodProfile,
    resolve_profile,
)
from livability.models.results import FactorSet

logger = logging.getLogger(__name__)

SCHOOL_RADIUS_M = 2000
HEALTH_RADIUS_M = 5000

SCHOOL_SATURATION = 10  # schools within radius for a full school score
HEALTH_SATURATION = 5
SCHOOL_WEIGHT = 0.6
HEALTH_WEIGHT = 0.4

# Used when the proximity index cannot be read
NEUTRAL_INFRASTRUCTURE = 0.5
NEUTRAL_EDUCATION = 0.5

SCHOOL_QUALITY: dict[SchoolType, float] = {
    SchoolType.SECONDARY: 0.4,
    SchoolType.COMBINED: 0.5,
    SchoolType.PRIMARY: 0.3,
}
DEFAULT_SCHOOL_QUALITY = 0.2

REGION_GROWTH: dict[str, float] = {
    "City Bowl": 0.12,
    "Atlantic Seaboard": 0.08,
    "Southern Suburbs": 0.10,
    "Northern Suburbs": 0.15,
    "Cape Flats": 0.18,
    "West Coast": 0.20,
}
DEFAULT_REGION_GROWTH = 0.10

AFFORDABILITY_DEMAND: dict[AffordabilityCategory, float] = {
    AffordabilityCategory.BUDGET: 0.15,
    AffordabilityCategory.AFFORDABLE: 0.12,
    AffordabilityCategory.MODERATE: 0.08,
    AffordabilityCategory.EXPENSIVE: 0.05,
    AffordabilityCategory.LUXURY: 0.03,
    AffordabilityCategory.ULTRA_LUXURY: 0.01,
}
DEFAULT_DEMAND = 0.08

# Gentrification pressure contributions
LOW_RENT_THRESHOLD = 20_000
LOW_RENT_PRESSURE = 0.3
SAFE_AREA_THRESHOLD = 6
SAFE_AREA_PRESSURE = 0.2
TRANSIT_THRESHOLD = 70
TRANSIT_PRESSURE = 0.2
INFRASTRUCTURE_PRESSURE_WEIGHT = 0.3


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def infrastructure_score(school_count: int, facility_count: int) -> float:
    school = min(1.0, school_count / SCHOOL_SATURATION)
    health = min(1.0, facility_count / HEALTH_SATURATION)
    return _clamp(school * SCHOOL_WEIGHT + health * HEALTH_WEIGHT, 0.0, 1.0)


def education_factor(schools: list[School]) -> float:
    """Sum quality weights by school type, capped at 1."""
    quality = sum(SCHOOL_QUALITY.get(s.school_type, DEFAULT_SCHOOL_QUALITY) for s in schools)
    return min(1.0, quality)


def safety_trend(safety_score: float) -> float:
    """Safer areas are treated as stable or improving, unsafe ones as declining."""
    base = safety_score / 10
    if base > 0.7:
        trend = 0.1
    elif base > 0.5:
        trend = 0.05
    else:
        trend = -0.05
    return _clamp(trend, -0.2, 0.2)


def transport_factor(transit_score: float) -> float:
    norm = transit_score / 100
    if norm > 0.8:
        return 0.15
    if norm > 0.6:
        return 0.10
    if norm > 0.4:
        return 0.05
    return 0.0


def economic_growth(region: str | None) -> float:
    if region is None:
        return DEFAULT_REGION_GROWTH
    return REGION_GROWTH.get(region.strip(), DEFAULT_REGION_GROWTH)


def supply_demand(category: AffordabilityCategory | None) -> float:
    if category is None:
        return DEFAULT_DEMAND
    return AFFORDABILITY_DEMAND.get(category, DEFAULT_DEMAND)


def gentrification_pressure(
    avg_rent: float,
    safety_score: float,
    transit_score: float,
    infrastructure: float,
) -> float:
    """Low rent, good safety, good transit and dense infrastructure add pressure."""
    pressure = 0.0
    if avg_rent < LOW_RENT_THRESHOLD:
        pressure += LOW_RENT_PRESSURE
    if safety_score > SAFE_AREA_THRESHOLD:
        pressure += SAFE_AREA_PRESSURE
    if transit_score > TRANSIT_THRESHOLD:
        pressure += TRANSIT_PRESSURE
    pressure += infrastructure * INFRASTRUCTURE_PRESSURE_WEIGHT
    return _clamp(pressure, 0.0, 1.0)


class FactorCalculator:
    """Derives a FactorSet from a profile and the amenities around it."""

    def __init__(self, index: ProximityIndex):
        self.index = index

    async def _amenity_factors(
        self, neighborhood: NeighborhoodProfile
    ) -> tuple[float, float, tuple[str, ...]]:
        """Return (infrastructure_score, education_factor, defaulted names)."""
        center = neighborhood.position
        try:
            schools = [
                a for a, _ in await self.index.collect(center, SCHOOL_RADIUS_M, AmenityCategory.SCHOOL)
            ]
        except MissingDependency as e:
            logger.warning(
                "Proximity index unavailable for %s schools, using neutral defaults: %s",
                neighborhood.id, e,
            )
            return NEUTRAL_INFRASTRUCTURE, NEUTRAL_EDUCATION, ("infrastructure_score", "education_factor")

        education = education_factor(schools)

        try:
            facilities = await self.index.collect(
                center, HEALTH_RADIUS_M, AmenityCategory.HEALTH_FACILITY
            )
        except MissingDependency as e:
            logger.warning(
                "Proximity index unavailable for %s health facilities, using neutral infrastructure: %s",
                neighborhood.id, e,
            )
            return NEUTRAL_INFRASTRUCTURE, education, ("infrastructure_score",)

        return infrastructure_score(len(schools), len(facilities)), education, ()

    async def compute_factors(self, neighborhood: NeighborhoodProfile) -> FactorSet:
        profile = resolve_profile(neighborhood)
        infrastructure, education, defaulted = await self._amenity_factors(profile)

        factors = FactorSet(
            infrastructure_score=infrastructure,
            safety_trend=safety_trend(profile.safety_score),
            education_factor=education,
            transport_factor=transport_factor(profile.transit_score),
            economic_growth=economic_growth(profile.region),
            supply_demand=supply_demand(profile.affordability_category),
            gentrification_pressure=gentrification_pressure(
                profile.avg_rent,
                profile.safety_score,
                profile.transit_score,
                infrastructure,
            ),
            defaulted=defaulted,
        )
        logger.debug("Factors for %s: %s", profile.id, factors)
        return factors
