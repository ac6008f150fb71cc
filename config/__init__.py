"""Settings modules for the kiosk, one per deployment environment."""
import os

ENV_VAR = "APP_ENV"

_ENVIRONMENTS = {
    "dev": "development",
    "development": "development",
    "prod": "production",
    "production": "production",
    "test": "testing",
    "testing": "testing",
}


def current_environment() -> str:
    # Unknown or unset values run as development.
    value = os.getenv(ENV_VAR, "").strip().lower()
    return _ENVIRONMENTS.get(value, "development")


def get_settings_module() -> str:
    return f"config.{current_environment()}"
