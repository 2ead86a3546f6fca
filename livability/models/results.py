"""Pydantic result models returned by the engine.

Bounds are declared on the fields so an out-of-range value fails at
construction instead of reaching the API layer.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FactorSet(BaseModel):
    model_config = {"frozen": True}

    infrastructure_score: float = Field(ge=0.0, le=1.0)
    safety_trend: float = Field(ge=-0.2, le=0.2)
    education_factor: float = Field(ge=0.0, le=1.0)
    transport_factor: float = Field(ge=0.0, le=0.15)
    economic_growth: float = Field(ge=0.0, le=1.0)  # annualized fraction
    supply_demand: float = Field(ge=0.0, le=1.0)  # annualized fraction
    gentrification_pressure: float = Field(ge=0.0, le=1.0)
    defaulted: tuple[str, ...] = ()  # factors that fell back to neutral values


class PricePoint(BaseModel):
    model_config = {"frozen": True}

    month: int = Field(ge=1)
    predicted_price: float = Field(gt=0)
    growth_rate: float = Field(ge=-0.02, le=0.05)
    confidence: int = Field(ge=0, le=100)


class PriceProjection(BaseModel):
    model_config = {"frozen": True}

    neighborhood: str | None = None
    current_price: float = Field(gt=0)
    predictions: list[PricePoint]
    overall_confidence: int = Field(ge=15, le=100)
    factors: FactorSet

    @property
    def horizon_months(self) -> int:
        return len(self.predictions)

    @property
    def final_price(self) -> float:
        return self.predictions[-1].predicted_price

    @property
    def total_growth(self) -> float:
        """Fractional change from the current price to the last month."""
        return self.final_price / self.current_price - 1


class RiskLevel(Enum):
    VERY_LOW = "Very Low"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"


class GentrificationAssessment(BaseModel):
    model_config = {"frozen": True}

    neighborhood: str | None = None
    risk_level: RiskLevel
    risk_score: int = Field(ge=0, le=100)
    timeframe: str
    key_factors: list[str]
    recommendations: list[str]


class NearbyAmenity(BaseModel):
    id: str
    name: str
    subtype: str
    distance_m: int = Field(ge=0)


class EducationDetail(BaseModel):
    total_schools: int = 0
    operational_schools: int = 0
    school_types: dict[str, int] = Field(default_factory=dict)
    languages: dict[str, int] = Field(default_factory=dict)
    has_full_education: bool = False
    education_score: int = Field(default=0, ge=0, le=100)
    nearest_school: NearbyAmenity | None = None
    diversity: int = 0  # distinct languages of instruction


class HealthcareDetail(BaseModel):
    total_facilities: int = 0
    active_facilities: int = 0
    classifications: dict[str, int] = Field(default_factory=dict)
    has_hospital: bool = False
    healthcare_score: int = Field(default=0, ge=0, le=100)
    nearest_facility: NearbyAmenity | None = None
    emergency_access: bool = False


class TransportDetail(BaseModel):
    total_routes: int = 0
    unique_origins: int = 0
    unique_destinations: int = 0
    connectivity: int = 0
    transport_score: int = Field(default=0, ge=0, le=100)
    major_destinations: list[str] = Field(default_factory=list)


class LivabilityReport(BaseModel):
    neighborhood: str | None = None
    score: int = Field(ge=0, le=100)
    education: EducationDetail
    healthcare: HealthcareDetail
    transport: TransportDetail
    degraded: tuple[str, ...] = ()  # domains scored neutrally after a lookup failure


class NeighborhoodAnalysis(BaseModel):
    neighborhood: str
    factors: FactorSet
    livability: LivabilityReport
    projection: PriceProjection
    gentrification: GentrificationAssessment
