"""Engine facade: the operations callers invoke on a loaded neighborhood.

Callers load the NeighborhoodProfile themselves; every operation here takes
the profile and reads amenities only through the injected ProximityIndex.
"""

import asyncio
import logging
import random

from livability.config import settings
from livability.engine import gentrification, livability
from livability.engine.factors import FactorCalculator
from livability.engine.prices import PriceSimulator
from livability.engine.proximity import ProximityIndex
from livability.errors import MissingDependency
from livability.models.geo import AmenityCategory
from livability.models.neighborhood import PROFILE_DEFAULTS, NeighborhoodProfile, resolve_profile
from livability.models.results import (
    EducationDetail,
    FactorSet,
    GentrificationAssessment,
    HealthcareDetail,
    LivabilityReport,
    NeighborhoodAnalysis,
    PriceProjection,
    TransportDetail,
)

logger = logging.getLogger(__name__)


class NeighborhoodEngine:
    def __init__(self, index: ProximityIndex, rng: random.Random | None = None):
        self.index = index
        self.factors = FactorCalculator(index)
        if rng is None:
            rng = random.Random(settings.random_seed)
        self.simulator = PriceSimulator(rng)

    async def compute_factors(self, neighborhood: NeighborhoodProfile) -> FactorSet:
        return await self.factors.compute_factors(neighborhood)

    async def _details(self, neighborhood: NeighborhoodProfile):
        """Look up the three access domains; a failed lookup yields None."""
        center = neighborhood.position
        lookups = (
            ("education", livability.SCHOOL_RADIUS_M, AmenityCategory.SCHOOL, None),
            ("healthcare", livability.HEALTH_RADIUS_M, AmenityCategory.HEALTH_FACILITY, None),
            ("transport", livability.TRANSIT_RADIUS_M, AmenityCategory.TRANSIT_ROUTE,
             livability.TRANSIT_ROUTE_LIMIT),
        )
        results = await asyncio.gather(
            *(self.index.collect(center, radius, category, limit) for _, radius, category, limit in lookups),
            return_exceptions=True,
        )

        found = {}
        for (domain, _, _, _), result in zip(lookups, results):
            if isinstance(result, MissingDependency):
                logger.warning(
                    "Proximity index unavailable for %s %s, scoring neutrally: %s",
                    neighborhood.id, domain, result,
                )
                found[domain] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                found[domain] = result
        return found

    async def score_livability(self, neighborhood: NeighborhoodProfile) -> LivabilityReport:
        found = await self._details(neighborhood)
        degraded = tuple(domain for domain, items in found.items() if items is None)

        education = (
            livability.analyze_education(found["education"])
            if found["education"] is not None
            else EducationDetail(education_score=livability.NEUTRAL_SUBSCORE)
        )
        healthcare = (
            livability.analyze_healthcare(found["healthcare"])
            if found["healthcare"] is not None
            else HealthcareDetail(healthcare_score=livability.NEUTRAL_SUBSCORE)
        )
        transport = (
            livability.analyze_transport(found["transport"])
            if found["transport"] is not None
            else TransportDetail(transport_score=livability.NEUTRAL_SUBSCORE)
        )

        return LivabilityReport(
            neighborhood=neighborhood.name,
            score=livability.score(
                education.education_score,
                healthcare.healthcare_score,
                transport.transport_score,
                neighborhood,
            ),
            education=education,
            healthcare=healthcare,
            transport=transport,
            degraded=degraded,
        )

    def _project(
        self,
        neighborhood: NeighborhoodProfile,
        factors: FactorSet,
        horizon_months: int,
    ) -> PriceProjection:
        # Current price is the resolved average rent; a zero rent projects from the default
        current_price = resolve_profile(neighborhood).avg_rent
        if not current_price > 0:
            logger.warning(
                "Average rent %s for %s is not positive, projecting from default %s",
                current_price, neighborhood.id, PROFILE_DEFAULTS["avg_rent"],
            )
            current_price = PROFILE_DEFAULTS["avg_rent"]
        return self.simulator.project(current_price, factors, horizon_months, neighborhood.name)

    async def project_prices(
        self,
        neighborhood: NeighborhoodProfile,
        horizon_months: int | None = None,
    ) -> PriceProjection:
        horizon = horizon_months if horizon_months is not None else settings.default_horizon_months
        factors = await self.compute_factors(neighborhood)
        return self._project(neighborhood, factors, horizon)

    async def assess_gentrification(self, neighborhood: NeighborhoodProfile) -> GentrificationAssessment:
        factors = await self.compute_factors(neighborhood)
        return gentrification.classify(factors, neighborhood.name)

    async def analyze(
        self,
        neighborhood: NeighborhoodProfile,
        horizon_months: int | None = None,
    ) -> NeighborhoodAnalysis:
        """Everything at once; the factor set is computed a single time and shared."""
        horizon = horizon_months if horizon_months is not None else settings.default_horizon_months
        factors, report = await asyncio.gather(
            self.compute_factors(neighborhood),
            self.score_livability(neighborhood),
        )
        return NeighborhoodAnalysis(
            neighborhood=neighborhood.name,
            factors=factors,
            livability=report,
            projection=self._project(neighborhood, factors, horizon),
            gentrification=gentrification.classify(factors, neighborhood.name),
        )
