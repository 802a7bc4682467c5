"""Coercion of raw calculator inputs and advisory range checks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from renteberegner.core.formatting import format_grouped


@dataclass(frozen=True)
class FieldRange:
    field: str
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    @property
    def message(self) -> str:
        return f"Værdi skal være mellem {format_grouped(self.minimum)} og {format_grouped(self.maximum)}"


FIELD_RANGES: Dict[str, FieldRange] = {
    r.field: r
    for r in (
        FieldRange("principal", 0, 10_000_000),
        FieldRange("periodicContribution", 0, 1_000_000),
        FieldRange("annualRate", 0, 50),
        FieldRange("years", 1, 100),
    )
}


class InputValidity(BaseModel):
    """One flag per field; True means the value is outside its allowed range."""

    model_config = ConfigDict(extra="forbid")

    principal: bool = False
    periodicContribution: bool = False
    annualRate: bool = False
    years: bool = False
    messages: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_fields

    @property
    def invalid_fields(self) -> List[str]:
        return [name for name in FIELD_RANGES if getattr(self, name)]


def _parse_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip().replace(" ", "")
        # "1.234,5" (Danish) and "1234,5" both mean 1234.5
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        return float(text)
    raise ValueError(f"cannot read a number from {type(value).__name__}")


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Read a number from user input; anything unreadable becomes `default`."""
    try:
        number = _parse_float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_years(value: Any) -> int:
    """Whole years from user input; unreadable input becomes 1. May be below 1."""
    number = coerce_number(value, default=1.0)
    return int(number)


def engine_years(years: int) -> int:
    return max(years, 1)


def validate_inputs(
    principal: float,
    periodic_contribution: float,
    annual_rate: float,
    years: float,
) -> InputValidity:
    """
    Flag out-of-range values for inline feedback.

    Never blocks the calculation; the projection runs on whatever numbers
    are present.
    """
    values = {
        "principal": principal,
        "periodicContribution": periodic_contribution,
        "annualRate": annual_rate,
        "years": years,
    }
    flags: Dict[str, bool] = {}
    messages: Dict[str, str] = {}
    for name, value in values.items():
        allowed = FIELD_RANGES[name]
        flags[name] = not allowed.contains(value)
        if flags[name]:
            messages[name] = allowed.message
    return InputValidity(**flags, messages=messages)
