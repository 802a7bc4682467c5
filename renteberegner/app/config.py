"""Configuration classes for the Flask app."""

from __future__ import annotations

import os
from typing import Dict, Optional, Type

from dotenv import load_dotenv

ENV_PREFIX = "RENTEBEREGNER"


class BaseConfig:
    TESTING = False
    DEBUG = False

    LOG_LEVEL = "INFO"
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    REFERENCE_RATES = [7.0, 20.0, 30.0]
    # hard ceiling for one request; the 1..100 range is only advisory
    MAX_YEARS = 1000


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class TestingConfig(BaseConfig):
    TESTING = True
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    CORS_ORIGINS = []


CONFIGS: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: Optional[str] = None) -> Type[BaseConfig]:
    """
    Pick a config class by name.

    Falls back to RENTEBEREGNER_ENV (read from the environment or a .env
    file), then to production.
    """
    load_dotenv()
    name = name or os.getenv(f"{ENV_PREFIX}_ENV", "production")
    try:
        return CONFIGS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown config {name!r}; expected one of {sorted(CONFIGS)}") from None
