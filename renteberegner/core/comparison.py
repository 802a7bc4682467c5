"""Side-by-side projections of the same plan at shifted rates."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer

from renteberegner.core.formatting import format_rate_label
from renteberegner.core.projection import finite_or_none, project

MIN_COMPARISON_RATE = 0.1
UPPER_RATE_OFFSET = 3.0
DEFAULT_REFERENCE_RATES: Tuple[float, ...] = (7.0, 20.0, 30.0)


class ComparisonScenario(BaseModel):
    model_config = ConfigDict(extra="forbid")

    label: str
    annualRatePercent: float
    finalBalance: float
    balances: Optional[List[float]] = None

    @field_serializer("finalBalance", "balances")
    def serialize_finite(self, value):
        return finite_or_none(value)


class ReferenceValue(BaseModel):
    model_config = ConfigDict(extra="forbid")

    annualRatePercent: float
    finalBalance: float

    @field_serializer("finalBalance")
    def serialize_finite(self, value):
        return finite_or_none(value)


def comparison_gaps(annual_rate_percent: float) -> Tuple[float, float]:
    """
    Distance below the user's rate for the two lower comparison lines.

    Higher rates get wider gaps. Under 5% the gaps scale with the rate,
    with a floor of 1 and 0.5 points.
    """
    if annual_rate_percent >= 12:
        return 8.0, 4.0
    if annual_rate_percent >= 8:
        return 6.0, 3.0
    if annual_rate_percent >= 5:
        return 3.0, 1.5
    return max(1.0, annual_rate_percent * 0.4), max(0.5, annual_rate_percent * 0.2)


def comparison_rates(annual_rate_percent: float) -> Tuple[float, float, float]:
    """Return (lower, middle, upper) comparison rates, never below 0.1%."""
    gap1, gap2 = comparison_gaps(annual_rate_percent)
    lower = max(MIN_COMPARISON_RATE, annual_rate_percent - gap1)
    middle = max(MIN_COMPARISON_RATE, annual_rate_percent - gap2)
    upper = annual_rate_percent + UPPER_RATE_OFFSET
    return lower, middle, upper


def compare_scenarios(
    principal: float,
    periodic_contribution: float,
    annual_rate_percent: float,
    years: int,
    include_series: bool = False,
) -> List[ComparisonScenario]:
    """Project the plan at each comparison rate, upper rate first."""
    lower, middle, upper = comparison_rates(annual_rate_percent)

    scenarios: List[ComparisonScenario] = []
    for rate in (upper, middle, lower):
        rows = project(principal, periodic_contribution, rate, years)
        scenarios.append(
            ComparisonScenario(
                label=format_rate_label(rate),
                annualRatePercent=rate,
                finalBalance=rows[-1].endBalance,
                balances=[row.endBalance for row in rows] if include_series else None,
            )
        )
    return scenarios


def reference_values(
    principal: float,
    periodic_contribution: float,
    years: int,
    rates: Sequence[float] = DEFAULT_REFERENCE_RATES,
) -> List[ReferenceValue]:
    """Final balance of the same plan at each fixed reference rate."""
    return [
        ReferenceValue(
            annualRatePercent=float(rate),
            finalBalance=project(principal, periodic_contribution, rate, years)[-1].endBalance,
        )
        for rate in rates
    ]
