"""
Environment-aware configuration.
Values come from the process environment (and .env via python-dotenv).
Durations such as JWT lifetimes are written as "15m" / "7d" strings and
turned into timedeltas by finalize_config() once overrides are applied.
"""
import os
import re
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

DEV_JWT_SECRET = "dev-secret-change-me"
MIN_SECRET_LENGTH = 16

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def parse_duration(value) -> timedelta:
    """Parse "30s", "15m", "12h", "7d" or a bare number of seconds."""
    if isinstance(value, timedelta):
        return value
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "development")
    # In production supply a comma-separated list
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///bookmarks.db")
    SQL_ECHO = _env_flag("SQL_ECHO", "false")

    JWT_SECRET = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRATION = os.getenv("JWT_ACCESS_EXPIRATION", "15m")
    JWT_REFRESH_EXPIRATION = os.getenv("JWT_REFRESH_EXPIRATION", "7d")

    TOKEN_SWEEP_ENABLED = _env_flag("TOKEN_SWEEP_ENABLED", "true")
    TOKEN_SWEEP_INTERVAL_SECONDS = int(os.getenv("TOKEN_SWEEP_INTERVAL_SECONDS", "3600"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Echo exception details in 500 responses (never in production)
    EXPOSE_ERROR_DETAILS = True


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    APP_ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///bookmarks-test.db")
    TOKEN_SWEEP_ENABLED = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "production"
    EXPOSE_ERROR_DETAILS = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV.
    """
    env = (name or os.getenv("APP_ENV", "development")).lower()
    if env in ("prod", "production"):
        return ProductionConfig
    if env in ("test", "testing"):
        return TestingConfig
    return DevelopmentConfig


def finalize_config(config) -> None:
    """Validate the loaded config and derive timedelta lifetimes in place."""
    secret = config.get("JWT_SECRET") or ""
    if len(secret) < MIN_SECRET_LENGTH:
        raise ValueError(f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters")
    if config.get("APP_ENV") == "production" and secret == DEV_JWT_SECRET:
        raise ValueError("JWT_SECRET must be set in production")

    config["JWT_ACCESS_LIFETIME"] = parse_duration(config["JWT_ACCESS_EXPIRATION"])
    config["JWT_REFRESH_LIFETIME"] = parse_duration(config["JWT_REFRESH_EXPIRATION"])
    if int(config["TOKEN_SWEEP_INTERVAL_SECONDS"]) <= 0:
        raise ValueError("TOKEN_SWEEP_INTERVAL_SECONDS must be positive")
