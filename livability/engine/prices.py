"""Monthly price path simulation.

Each month compounds a growth rate built from the factor set, shaped by a
fixed seasonal table and capped at -2%/+5%, then applies a random volatility
shock sized by how stable the area looks. Confidence decays with the horizon.

The seasonal table follows the Cape Town rental cycle (summer peak around
November, winter trough in May). It is hand-tuned, not estimated.
"""

import math
import random

from livability.engine.rounding import round_half_up
from livability.errors import InvalidHorizon, InvalidPrice
from livability.models.results import FactorSet, PricePoint, PriceProjection

MAX_HORIZON_MONTHS = 60

SEASONAL_FACTORS: tuple[float, ...] = (
    1.02, 1.01, 0.99, 0.98, 0.97, 0.98,  # Jan-Jun
    0.99, 1.00, 1.01, 1.02, 1.03, 1.02,  # Jul-Dec
)

MIN_MONTHLY_RATE = -0.02
MAX_MONTHLY_RATE = 0.05

INFRASTRUCTURE_PREMIUM = 0.02  # annual, at infrastructure_score = 1
EDUCATION_PREMIUM = 0.015  # annual, at education_factor = 1
GENTRIFICATION_PREMIUM = 0.03  # annual, at full pressure after 36 months
GENTRIFICATION_RAMP_MONTHS = 36

BASE_VOLATILITY = 0.05
MIN_TIME_DECAY = 0.3


def seasonal_factor(month: int) -> float:
    """Seasonal multiplier for a 1-based month offset; period 12."""
    return SEASONAL_FACTORS[(month - 1) % 12]


def monthly_growth_rate(factors: FactorSet, month: int) -> float:
    rate = factors.economic_growth / 12
    rate += factors.infrastructure_score * INFRASTRUCTURE_PREMIUM / 12
    rate += factors.safety_trend / 12
    rate += factors.education_factor * EDUCATION_PREMIUM / 12
    rate += factors.transport_factor / 12
    rate += factors.supply_demand / 12

    # Gentrification accelerates the longer it runs
    ramp = month / GENTRIFICATION_RAMP_MONTHS
    rate += factors.gentrification_pressure * ramp * GENTRIFICATION_PREMIUM / 12

    rate *= seasonal_factor(month)
    return max(MIN_MONTHLY_RATE, min(MAX_MONTHLY_RATE, rate))


def volatility(factors: FactorSet) -> float:
    """Amplitude of the monthly random shock; stable areas swing less."""
    stability = (factors.infrastructure_score + factors.safety_trend + 1) / 3
    return BASE_VOLATILITY * (2 - stability)


def monthly_confidence(month: int, factors: FactorSet) -> int:
    time_decay = max(MIN_TIME_DECAY, 1 - month / MAX_HORIZON_MONTHS)
    stability = (
        factors.infrastructure_score
        + abs(factors.safety_trend)
        + factors.education_factor
    ) / 3
    return max(0, min(100, round_half_up(time_decay * stability * 100)))


def overall_confidence(factors: FactorSet) -> int:
    """Projection-wide confidence, 15-100."""
    data_quality = (
        factors.infrastructure_score
        + factors.education_factor
        + (1.0 if factors.safety_trend > 0 else 0.5)
    ) / 3
    return max(15, min(100, round_half_up(data_quality * 85 + 15)))


def _validate(current_price: float, horizon_months: int) -> None:
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int):
        raise InvalidHorizon(f"horizon must be an integer number of months, got {horizon_months!r}")
    if not 1 <= horizon_months <= MAX_HORIZON_MONTHS:
        raise InvalidHorizon(f"horizon must be 1-{MAX_HORIZON_MONTHS} months, got {horizon_months}")
    try:
        price_ok = math.isfinite(current_price) and current_price > 0
    except TypeError:
        price_ok = False
    if not price_ok:
        raise InvalidPrice(f"current price must be a positive number, got {current_price!r}")


class PriceSimulator:
    """Projects a monthly price path; the random source is injectable for reproducibility."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def project(
        self,
        current_price: float,
        factors: FactorSet,
        horizon_months: int,
        neighborhood: str | None = None,
    ) -> PriceProjection:
        _validate(current_price, horizon_months)

        shock_amplitude = volatility(factors)
        price = float(current_price)
        predictions: list[PricePoint] = []

        for month in range(1, horizon_months + 1):
            rate = monthly_growth_rate(factors, month)
            price *= 1 + rate
            price *= 1 + (self.rng.random() - 0.5) * shock_amplitude

            predictions.append(PricePoint(
                month=month,
                predicted_price=price,
                growth_rate=rate,
                confidence=monthly_confidence(month, factors),
            ))

        return PriceProjection(
            neighborhood=neighborhood,
            current_price=current_price,
            predictions=predictions,
            overall_confidence=overall_confidence(factors),
            factors=factors,
        )
