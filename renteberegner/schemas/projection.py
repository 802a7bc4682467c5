"""Data contracts for projection requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from renteberegner.core.comparison import ComparisonScenario
from renteberegner.core.inputs import InputValidity, coerce_number, coerce_years
from renteberegner.core.projection import (
    ContributionFrequency,
    ProjectionSummary,
    YearlySnapshot,
    finite_or_none,
)


class ProjectionRequest(BaseModel):
    """
    Raw calculator inputs.

    Amounts may arrive as numbers or as text typed into a form field;
    anything that cannot be read as a number becomes 0 (years become 1).
    """

    model_config = ConfigDict(extra="forbid")

    principal: float = Field(0.0, description="Initial lump sum.")
    periodicContribution: float = Field(
        0.0,
        description="Recurring contribution, per `contributionFrequency`.",
    )
    annualRate: float = Field(0.0, description="Yearly rate in percent (7 means 7%).")
    years: int = Field(1, description="Number of years to project.")
    contributionFrequency: ContributionFrequency = "yearly"
    includeSeries: bool = False

    @field_validator("principal", "periodicContribution", "annualRate", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("years", mode="before")
    @classmethod
    def _coerce_years(cls, value: Any) -> int:
        return coerce_years(value)


class ProjectionInputs(BaseModel):
    """Inputs as the engine saw them: contribution annualized, years floored to 1."""

    principal: float
    periodicContribution: float
    annualRate: float
    years: int

    @field_serializer("*")
    def serialize_finite(self, value):
        return finite_or_none(value)


class FormattedSummary(BaseModel):
    finalBalance: str
    totalContributed: str
    totalInterest: str
    interestPercentage: str
    finalBalanceCompact: str


class ProjectionResponse(BaseModel):
    inputs: ProjectionInputs
    validity: InputValidity
    snapshots: List[YearlySnapshot]
    summary: ProjectionSummary
    formatted: FormattedSummary
    cumulativeReturn: List[float]

    @field_serializer("cumulativeReturn")
    def serialize_finite(self, value):
        return finite_or_none(value)


class ComparisonResponse(BaseModel):
    baseRate: float
    gaps: List[float]
    scenarios: List[ComparisonScenario]


class ReferenceValueRow(BaseModel):
    annualRatePercent: float
    label: str
    finalBalance: float
    formatted: str

    @field_serializer("finalBalance")
    def serialize_finite(self, value):
        return finite_or_none(value)


class ReferenceValuesResponse(BaseModel):
    values: List[ReferenceValueRow]


class ErrorResponse(BaseModel):
    detail: Any
    requestId: Optional[str] = None

    @classmethod
    def from_message(cls, message: str, request_id: Optional[str] = None) -> Dict[str, Any]:
        return cls(detail=message, requestId=request_id).model_dump(exclude_none=True)
