"""Tests for predictive factor derivation."""

import logging

import pytest
from pydantic import ValidationError

from livability.engine.factors import (
    FactorCalculator,
    economic_growth,
    education_factor,
    gentrification_pressure,
    infrastructure_score,
    safety_trend,
    supply_demand,
    transport_factor,
)
from livability.models.geo import AmenityCategory, GeoPoint, School, SchoolType
from livability.models.neighborhood import AffordabilityCategory, NeighborhoodProfile
from livability.models.results import FactorSet


def _schools(*types: SchoolType) -> list[School]:
    return [
        School(id=str(i), name=f"S{i}", position=GeoPoint(0, 0), school_type=t)
        for i, t in enumerate(types)
    ]


class TestInfrastructureScore:
    def test_no_amenities(self):
        assert infrastructure_score(0, 0) == 0.0

    def test_saturates(self):
        """Counts past ten schools and five facilities are capped at the maximum."""
        assert infrastructure_score(25, 12) == pytest.approx(1.0)

    def test_weighting(self):
        """Schools carry 60% of the infrastructure score and health facilities 40%."""
        # 5 schools -> 0.5 * 0.6, 1 facility -> 0.2 * 0.4
        assert infrastructure_score(5, 1) == pytest.approx(0.38)


class TestEducationFactor:
    def test_weights_by_type(self):
        """Each listed school type adds its own weight; any other type adds 0.2."""
        assert education_factor(_schools(SchoolType.SECONDARY)) == pytest.approx(0.4)
        assert education_factor(_schools(SchoolType.COMBINED)) == pytest.approx(0.5)
        assert education_factor(_schools(SchoolType.PRIMARY)) == pytest.approx(0.3)
        assert education_factor(_schools(SchoolType.INTERMEDIATE)) == pytest.approx(0.2)
        assert education_factor(_schools(SchoolType.OTHER)) == pytest.approx(0.2)

    def test_capped_at_one(self):
        assert education_factor(_schools(*[SchoolType.COMBINED] * 5)) == 1.0

    def test_empty(self):
        assert education_factor([]) == 0.0


class TestScalarFactors:
    @pytest.mark.parametrize("score,expected", [
        (10, 0.1), (7.1, 0.1), (7, 0.05), (5.1, 0.05), (5, -0.05), (0, -0.05),
    ])
    def test_safety_trend_tiers(self, score, expected):
        assert safety_trend(score) == expected

    @pytest.mark.parametrize("score,expected", [
        (100, 0.15), (81, 0.15), (80, 0.10), (61, 0.10), (60, 0.05), (41, 0.05), (40, 0.0), (0, 0.0),
    ])
    def test_transport_tiers(self, score, expected):
        assert transport_factor(score) == expected

    def test_region_growth_table(self):
        assert economic_growth("West Coast") == 0.20
        assert economic_growth("Atlantic Seaboard") == 0.08
        assert economic_growth("Cape Flats") == 0.18

    def test_unknown_region_defaults(self):
        assert economic_growth("Karoo") == 0.10
        assert economic_growth(None) == 0.10

    def test_supply_demand_table(self):
        assert supply_demand(AffordabilityCategory.BUDGET) == 0.15
        assert supply_demand(AffordabilityCategory.ULTRA_LUXURY) == 0.01

    def test_supply_demand_unmapped(self):
        assert supply_demand(None) == 0.08

    def test_pressure_components(self):
        """Each pressure condition adds its own share to the total."""
        assert gentrification_pressure(15_000, 8, 75, 0.0) == pytest.approx(0.7)
        assert gentrification_pressure(25_000, 5, 50, 0.0) == 0.0
        assert gentrification_pressure(25_000, 5, 50, 1.0) == pytest.approx(0.3)

    def test_pressure_clamped(self):
        assert gentrification_pressure(1_000, 10, 100, 1.0) == 1.0

    def test_pressure_thresholds_are_strict(self):
        """Rent 20000, safety 6 and transit 70 sit exactly on the thresholds and add nothing."""
        assert gentrification_pressure(20_000, 6, 70, 0.0) == 0.0


class TestFactorCalculator:
    async def test_observatory_factors(self, index, observatory):
        """Observatory fixture: four schools within 2 km, two facilities within 5 km."""
        factors = await FactorCalculator(index).compute_factors(observatory)
        assert factors.infrastructure_score == pytest.approx(0.4)
        # 0.3 + 0.4 + 0.3 + 0.5 capped
        assert factors.education_factor == 1.0
        assert factors.safety_trend == 0.05
        assert factors.transport_factor == 0.10
        assert factors.economic_growth == 0.10
        assert factors.supply_demand == 0.12
        assert factors.gentrification_pressure == pytest.approx(0.82)
        assert factors.defaulted == ()

    async def test_no_amenities_pressure_example(self, empty_index, gentrifying):
        """A cheap, safe, well-connected area with no amenities nearby."""
        factors = await FactorCalculator(empty_index).compute_factors(gentrifying)
        assert factors.infrastructure_score == 0.0
        assert factors.education_factor == 0.0
        assert factors.gentrification_pressure == pytest.approx(0.7)

    async def test_index_failure_uses_neutral_defaults(self, failing_index, gentrifying, caplog):
        """An unreachable index gives 0.5 for the amenity factors and logs a warning."""
        with caplog.at_level(logging.WARNING, logger="livability.engine.factors"):
            factors = await FactorCalculator(failing_index).compute_factors(gentrifying)
        assert factors.infrastructure_score == 0.5
        assert factors.education_factor == 0.5
        assert set(factors.defaulted) == {"infrastructure_score", "education_factor"}
        # 0.7 + 0.5 * 0.3
        assert factors.gentrification_pressure == pytest.approx(0.85)
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    async def test_health_layer_failure_keeps_education(self, partial_index, observatory):
        """Only health facilities fail, so education is still computed from schools."""
        index = partial_index(AmenityCategory.HEALTH_FACILITY)
        factors = await FactorCalculator(index).compute_factors(observatory)
        assert factors.infrastructure_score == 0.5
        assert factors.education_factor == 1.0
        assert factors.defaulted == ("infrastructure_score",)

    async def test_missing_profile_fields_use_default_table(self, empty_index):
        sparse = NeighborhoodProfile(
            id="x", name="Sparse", region=None, position=GeoPoint(-33.9, 18.5),
        )
        factors = await FactorCalculator(empty_index).compute_factors(sparse)
        # safety 5 -> base 0.5 -> declining; transit 50 -> 0.05; rent 15000 -> +0.3
        assert factors.safety_trend == -0.05
        assert factors.transport_factor == 0.05
        assert factors.supply_demand == 0.08
        assert factors.economic_growth == 0.10
        assert factors.gentrification_pressure == pytest.approx(0.3)

    async def test_explicit_zero_is_not_defaulted(self, empty_index):
        """A recorded 0 is data, not a missing value."""
        profile = NeighborhoodProfile(
            id="z", name="Zero", region=None, position=GeoPoint(-33.9, 18.5),
            avg_rent=0, safety_score=0, transit_score=0,
        )
        factors = await FactorCalculator(empty_index).compute_factors(profile)
        assert factors.transport_factor == 0.0
        assert factors.gentrification_pressure == pytest.approx(0.3)

    async def test_does_not_mutate_profile(self, empty_index):
        sparse = NeighborhoodProfile(id="x", name="Sparse", region=None, position=GeoPoint(0, 0))
        await FactorCalculator(empty_index).compute_factors(sparse)
        assert sparse.avg_rent is None


class TestFactorSetBounds:
    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            FactorSet(
                infrastructure_score=1.2, safety_trend=0, education_factor=0,
                transport_factor=0, economic_growth=0, supply_demand=0,
                gentrification_pressure=0,
            )

    def test_transport_upper_bound(self):
        with pytest.raises(ValidationError):
            FactorSet(
                infrastructure_score=0, safety_trend=0, education_factor=0,
                transport_factor=0.2, economic_growth=0, supply_demand=0,
                gentrification_pressure=0,
            )
