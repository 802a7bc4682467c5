"""HTTP routes for the Flask API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import BadRequest

from renteberegner import __version__
from renteberegner.app.log_setup import get_request_id
from renteberegner.core.comparison import compare_scenarios, comparison_gaps, reference_values
from renteberegner.core.formatting import (
    format_dkk,
    format_dkk_compact,
    format_percent,
    format_rate_label,
)
from renteberegner.core.inputs import engine_years, validate_inputs
from renteberegner.core.projection import (
    annualize_contribution,
    cumulative_return_series,
    project,
    summarize,
)
from renteberegner.core.state import CalculatorStateStore
from renteberegner.schemas.ping import PingResponse
from renteberegner.schemas.projection import (
    ComparisonResponse,
    ErrorResponse,
    FormattedSummary,
    ProjectionInputs,
    ProjectionRequest,
    ProjectionResponse,
    ReferenceValueRow,
    ReferenceValuesResponse,
)
from renteberegner.schemas.state import StateUpdateRequest

logger = logging.getLogger(__name__)

STATE_EXTENSION = "calculator_state"

api_bp = Blueprint("api", __name__)


class HorizonTooLongError(ValueError):
    def __init__(self, years: int, max_years: int):
        super().__init__(f"years must be at most {max_years}")
        self.years = years
        self.max_years = max_years


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.info("rejected payload: %d validation error(s)", exc.error_count())
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False), "requestId": get_request_id()}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.errorhandler(HorizonTooLongError)
def _handle_horizon_too_long(exc: HorizonTooLongError):
    logger.info("rejected projection of %d years (max %d)", exc.years, exc.max_years)
    detail = [{"loc": ["years"], "msg": str(exc), "type": "less_than_equal", "input": exc.years}]
    return jsonify({"detail": detail, "requestId": get_request_id()}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(BadRequest)
def _handle_bad_request(exc: BadRequest):
    return jsonify(ErrorResponse.from_message("request body must be JSON", get_request_id())), HTTPStatus.BAD_REQUEST


def _state_store() -> CalculatorStateStore:
    return current_app.extensions[STATE_EXTENSION]


def _read_json() -> Any:
    return request.get_json(force=True, silent=False)


def _engine_inputs(payload: ProjectionRequest) -> ProjectionInputs:
    max_years = current_app.config["MAX_YEARS"]
    if payload.years > max_years:
        raise HorizonTooLongError(payload.years, max_years)
    return ProjectionInputs(
        principal=payload.principal,
        periodicContribution=annualize_contribution(
            payload.periodicContribution, payload.contributionFrequency
        ),
        annualRate=payload.annualRate,
        years=engine_years(payload.years),
    )


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong", version=__version__)
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Year-by-year projection with summary figures and advisory validity flags."""
    payload = ProjectionRequest.model_validate(_read_json())
    inputs = _engine_inputs(payload)
    logger.debug("projection inputs: %s", inputs.model_dump())

    validity = validate_inputs(
        payload.principal,
        payload.periodicContribution,
        payload.annualRate,
        payload.years,
    )
    if not validity.is_valid:
        logger.info("out-of-range inputs: %s", ", ".join(validity.invalid_fields))

    snapshots = project(inputs.principal, inputs.periodicContribution, inputs.annualRate, inputs.years)
    summary = summarize(snapshots)

    _state_store().update(**inputs.model_dump())

    response = ProjectionResponse(
        inputs=inputs,
        validity=validity,
        snapshots=list(snapshots),
        summary=summary,
        formatted=FormattedSummary(
            finalBalance=format_dkk(summary.finalBalance),
            totalContributed=format_dkk(summary.totalContributed),
            totalInterest=format_dkk(summary.totalInterest),
            interestPercentage=format_percent(summary.interestPercentage),
            finalBalanceCompact=format_dkk_compact(summary.finalBalance),
        ),
        cumulativeReturn=cumulative_return_series(snapshots),
    )
    return jsonify(response.model_dump())


@api_bp.post("/projection/comparison")
def comparison() -> Any:
    """The same plan at rates around the user's rate, for benchmark lines."""
    payload = ProjectionRequest.model_validate(_read_json())
    inputs = _engine_inputs(payload)

    scenarios = compare_scenarios(
        inputs.principal,
        inputs.periodicContribution,
        inputs.annualRate,
        inputs.years,
        include_series=payload.includeSeries,
    )
    response = ComparisonResponse(
        baseRate=inputs.annualRate,
        gaps=list(comparison_gaps(inputs.annualRate)),
        scenarios=scenarios,
    )
    return jsonify(response.model_dump(exclude_none=True))


@api_bp.post("/projection/reference-values")
def reference() -> Any:
    """Final balance of the plan at the configured fixed reference rates."""
    payload = ProjectionRequest.model_validate(_read_json())
    inputs = _engine_inputs(payload)

    values = reference_values(
        inputs.principal,
        inputs.periodicContribution,
        inputs.years,
        rates=current_app.config["REFERENCE_RATES"],
    )
    response = ReferenceValuesResponse(
        values=[
            ReferenceValueRow(
                annualRatePercent=value.annualRatePercent,
                label=format_rate_label(value.annualRatePercent),
                finalBalance=value.finalBalance,
                formatted=format_dkk(value.finalBalance),
            )
            for value in values
        ]
    )
    return jsonify(response.model_dump())


@api_bp.get("/state")
def get_state() -> Any:
    """Latest calculator inputs."""
    return jsonify(_state_store().get().model_dump(mode="json"))


@api_bp.put("/state")
def put_state() -> Any:
    raw_payload: Dict[str, Any] = _read_json()
    payload = StateUpdateRequest.model_validate(raw_payload)
    state = _state_store().update(**payload.changes())
    return jsonify(state.model_dump(mode="json"))
