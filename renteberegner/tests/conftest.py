from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from renteberegner.app import create_app
from renteberegner.core.projection import clear_projection_cache
from renteberegner.core.state import CalculatorStateStore


@pytest.fixture()
def state_store() -> CalculatorStateStore:
    return CalculatorStateStore()


@pytest.fixture()
def app(state_store: CalculatorStateStore) -> Flask:
    return create_app("testing", state_store=state_store)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def _fresh_projection_cache():
    clear_projection_cache()
    yield
