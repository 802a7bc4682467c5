from __future__ import annotations

import math
from functools import lru_cache
from typing import Any, Iterable, List, Literal, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer

ContributionFrequency = Literal["yearly", "monthly"]

MONTHS_PER_YEAR = 12


def finite_or_none(value: Any) -> Any:
    """JSON has no Infinity or NaN; overflowed amounts go out as null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, list):
        return [finite_or_none(item) for item in value]
    return value


class YearlySnapshot(BaseModel):
    """State of the investment at one year boundary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    year: int
    startBalance: float
    contribution: float
    interest: float
    endBalance: float
    totalContributed: float

    @field_serializer("*")
    def serialize_finite(self, value: Any) -> Any:
        return finite_or_none(value)


class ProjectionSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    finalBalance: float
    totalContributed: float
    totalInterest: float
    interestPercentage: float

    @field_serializer("*")
    def serialize_finite(self, value: Any) -> Any:
        return finite_or_none(value)


def annualize_contribution(amount: float, frequency: ContributionFrequency = "yearly") -> float:
    """Turn a contribution entered per `frequency` into the yearly amount the engine uses."""
    if frequency == "monthly":
        return amount * MONTHS_PER_YEAR
    return amount


def project(
    principal: float,
    periodic_contribution: float,
    annual_rate_percent: float,
    years: int,
) -> Tuple[YearlySnapshot, ...]:
    """
    Build the year-by-year projection, year 0 included.

    Order of operations (per year >= 1):
      1) Add the yearly contribution to the starting balance.
      2) Compute interest on the post-contribution balance.
      3) Add the interest.

    `periodic_contribution` is a yearly amount. `years` below 1 is floored to 1.
    Results are cached against the input tuple, so repeated calls with the
    same inputs return the same tuple.
    """
    return _project(
        float(principal),
        float(periodic_contribution),
        float(annual_rate_percent),
        max(int(years), 1),
    )


@lru_cache(maxsize=256)
def _project(
    principal: float,
    periodic_contribution: float,
    annual_rate_percent: float,
    years: int,
) -> Tuple[YearlySnapshot, ...]:
    rate = annual_rate_percent / 100

    balance = principal
    total_contributed = principal

    rows: List[YearlySnapshot] = [
        YearlySnapshot(
            year=0,
            startBalance=0.0,
            contribution=principal,
            interest=0.0,
            endBalance=principal,
            totalContributed=principal,
        )
    ]

    for year in range(1, years + 1):
        start = balance
        total_contributed += periodic_contribution

        # contribution goes in before this year's interest is computed
        balance = start + periodic_contribution
        interest = balance * rate
        balance += interest

        rows.append(
            YearlySnapshot(
                year=year,
                startBalance=start,
                contribution=periodic_contribution,
                interest=interest,
                endBalance=balance,
                totalContributed=total_contributed,
            )
        )

    return tuple(rows)


def clear_projection_cache() -> None:
    _project.cache_clear()


def return_percentage(end_balance: float, total_contributed: float) -> float:
    if total_contributed <= 0:
        return 0.0
    return (end_balance - total_contributed) / total_contributed * 100


def summarize(snapshots: Sequence[YearlySnapshot]) -> ProjectionSummary:
    """Final balance, money put in, interest earned and the percentage return."""
    last = snapshots[-1]
    total_interest = last.endBalance - last.totalContributed
    return ProjectionSummary(
        finalBalance=last.endBalance,
        totalContributed=last.totalContributed,
        totalInterest=total_interest,
        interestPercentage=return_percentage(last.endBalance, last.totalContributed),
    )


def final_balance(
    principal: float,
    periodic_contribution: float,
    annual_rate_percent: float,
    years: int,
) -> float:
    return project(principal, periodic_contribution, annual_rate_percent, years)[-1].endBalance


def cumulative_interest_series(snapshots: Iterable[YearlySnapshot]) -> List[float]:
    return [row.endBalance - row.totalContributed for row in snapshots]


def cumulative_return_series(snapshots: Iterable[YearlySnapshot]) -> List[float]:
    return [return_percentage(row.endBalance, row.totalContributed) for row in snapshots]


__all__ = [
    "ContributionFrequency",
    "YearlySnapshot",
    "ProjectionSummary",
    "finite_or_none",
    "annualize_contribution",
    "project",
    "clear_projection_cache",
    "return_percentage",
    "summarize",
    "final_balance",
    "cumulative_interest_series",
    "cumulative_return_series",
]
