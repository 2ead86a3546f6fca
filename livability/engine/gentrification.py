"""Gentrification risk classification from the pressure factor."""

from livability.engine.rounding import round_half_up
from livability.models.results import FactorSet, GentrificationAssessment, RiskLevel

# (min pressure, level, timeframe), highest first
RISK_BANDS: tuple[tuple[float, RiskLevel, str], ...] = (
    (0.8, RiskLevel.VERY_HIGH, "1-2 years"),
    (0.6, RiskLevel.HIGH, "2-4 years"),
    (0.4, RiskLevel.MODERATE, "4-7 years"),
    (0.2, RiskLevel.LOW, "7-10 years"),
    (0.0, RiskLevel.VERY_LOW, "10+ years"),
)

HIGH_PRESSURE_RECOMMENDATIONS = [
    "Consider investing now before significant price increases",
    "Existing residents should be aware of potential displacement pressure",
    "Monitor rental market closely for rapid changes",
]
MODERATE_PRESSURE_RECOMMENDATIONS = [
    "Good medium-term investment opportunity",
    "Stable area with gradual improvement expected",
    "Suitable for long-term residents",
]
LOW_PRESSURE_RECOMMENDATIONS = [
    "Stable area with minimal gentrification pressure",
    "Good for affordable long-term housing",
    "Lower investment appreciation potential",
]


def _band(pressure: float) -> tuple[RiskLevel, str]:
    for threshold, level, timeframe in RISK_BANDS:
        if pressure >= threshold:
            return level, timeframe
    return RiskLevel.VERY_LOW, "10+ years"


def categorize_risk(pressure: float) -> RiskLevel:
    return _band(pressure)[0]


def estimate_timeframe(pressure: float) -> str:
    return _band(pressure)[1]


def key_factors(factors: FactorSet) -> list[str]:
    reasons = []
    if factors.infrastructure_score > 0.7:
        reasons.append("Strong infrastructure development")
    if factors.transport_factor > 0.1:
        reasons.append("Excellent transport connectivity")
    if factors.safety_trend > 0.05:
        reasons.append("Improving safety conditions")
    if factors.supply_demand > 0.1:
        reasons.append("High housing demand")
    return reasons


def recommendations(pressure: float) -> list[str]:
    if pressure >= 0.7:
        return list(HIGH_PRESSURE_RECOMMENDATIONS)
    if pressure >= 0.4:
        return list(MODERATE_PRESSURE_RECOMMENDATIONS)
    return list(LOW_PRESSURE_RECOMMENDATIONS)


def classify(factors: FactorSet, neighborhood: str | None = None) -> GentrificationAssessment:
    pressure = factors.gentrification_pressure
    level, timeframe = _band(pressure)
    return GentrificationAssessment(
        neighborhood=neighborhood,
        risk_level=level,
        risk_score=max(0, min(100, round_half_up(pressure * 100))),
        timeframe=timeframe,
        key_factors=key_factors(factors),
        recommendations=recommendations(pressure),
    )
