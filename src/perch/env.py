"""Runtime environment detection.

The environment name comes from the ``PERCH_ENV`` variable and defaults
to ``"development"``. ``AppConfig.environment`` reads it once at
construction; these helpers read it live.
"""

import os

ENV_VAR = "PERCH_ENV"

DEVELOPMENT = "development"
TEST = "test"
PRODUCTION = "production"


def current_environment() -> str:
    """Return the name of the running environment.

    Typical values are ``"development"``, ``"test"`` and ``"production"``.
    Any other value is returned as-is, lower-cased.
    """
    return os.environ.get(ENV_VAR, DEVELOPMENT).strip().lower() or DEVELOPMENT


def is_development() -> bool:
    return current_environment() == DEVELOPMENT


def is_testing() -> bool:
    return current_environment() == TEST


def is_production() -> bool:
    return current_environment() == PRODUCTION
