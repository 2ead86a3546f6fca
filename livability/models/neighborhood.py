"""Neighborhood profile and the default table for sparse source records."""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from livability.errors import UnknownCategory
from livability.models.geo import GeoPoint

logger = logging.getLogger(__name__)


class AffordabilityCategory(Enum):
    BUDGET = "Budget"
    AFFORDABLE = "Affordable"
    MODERATE = "Moderate"
    EXPENSIVE = "Expensive"
    LUXURY = "Luxury"
    ULTRA_LUXURY = "Ultra-Luxury"


def parse_affordability(raw: str | None, strict: bool = False) -> AffordabilityCategory | None:
    """Parse a raw affordability label; unknown labels map to None (neutral demand)."""
    if raw is None:
        return None
    text = str(raw).strip().lower().replace(" ", "-").replace("_", "-")
    for member in AffordabilityCategory:
        if member.value.lower() == text:
            return member
    if strict:
        raise UnknownCategory(f"unknown affordability category: {raw!r}")
    logger.debug("Unmapped affordability category %r", raw)
    return None


@dataclass(frozen=True)
class NeighborhoodProfile:
    id: str
    name: str
    region: str | None
    position: GeoPoint
    avg_rent: float | None = None  # monthly, local currency
    safety_score: float | None = None  # 0-10
    transit_score: float | None = None  # 0-100
    affordability_category: AffordabilityCategory | None = None

    def __post_init__(self) -> None:
        if self.avg_rent is not None and self.avg_rent < 0:
            raise ValueError(f"avg_rent must be >= 0, got {self.avg_rent}")
        if self.safety_score is not None and not 0 <= self.safety_score <= 10:
            raise ValueError(f"safety_score must be in [0, 10], got {self.safety_score}")
        if self.transit_score is not None and not 0 <= self.transit_score <= 100:
            raise ValueError(f"transit_score must be in [0, 100], got {self.transit_score}")


# Values substituted for missing profile fields. Only None is replaced;
# an explicit 0 is real data and is kept.
PROFILE_DEFAULTS: dict[str, float] = {
    "avg_rent": 15000.0,
    "safety_score": 5.0,
    "transit_score": 50.0,
}


def resolve_profile(profile: NeighborhoodProfile) -> NeighborhoodProfile:
    """Return a copy of the profile with every missing numeric field defaulted.

    affordability_category stays None when absent; the supply/demand table
    treats None as its neutral entry.
    """
    missing = {
        name: default
        for name, default in PROFILE_DEFAULTS.items()
        if getattr(profile, name) is None
    }
    if not missing:
        return profile
    logger.debug("Neighborhood %s: defaulting %s", profile.id, ", ".join(sorted(missing)))
    return replace(profile, **missing)
