"""Data contracts for the shared calculator state."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from renteberegner.core.inputs import coerce_number, coerce_years


class StateUpdateRequest(BaseModel):
    """Partial update; fields left out keep their current value."""

    model_config = ConfigDict(extra="forbid")

    principal: Optional[float] = None
    periodicContribution: Optional[float] = None
    annualRate: Optional[float] = None
    years: Optional[int] = None

    @field_validator("principal", "periodicContribution", "annualRate", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Optional[float]:
        return None if value is None else coerce_number(value)

    @field_validator("years", mode="before")
    @classmethod
    def _coerce_years(cls, value: Any) -> Optional[int]:
        return None if value is None else max(coerce_years(value), 1)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)
