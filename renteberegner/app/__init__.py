"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from renteberegner.app.api.routes import STATE_EXTENSION, api_bp
from renteberegner.app.config import ENV_PREFIX, get_config
from renteberegner.app.log_setup import get_request_id, set_request_id, setup_logging
from renteberegner.core.state import CalculatorStateStore

logger = logging.getLogger(__name__)


def create_app(
    config_name: Optional[str] = None,
    state_store: Optional[CalculatorStateStore] = None,
) -> Flask:
    """Build the Flask app instance."""
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.config.from_prefixed_env(ENV_PREFIX)

    setup_logging(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    app.extensions[STATE_EXTENSION] = state_store or CalculatorStateStore()

    @app.before_request
    def _assign_request_id() -> None:
        set_request_id(request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12])

    @app.after_request
    def _echo_request_id(response):
        response.headers["X-Request-ID"] = get_request_id()
        return response

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info("app created (testing=%s, debug=%s)", app.testing, app.debug)
    return app
