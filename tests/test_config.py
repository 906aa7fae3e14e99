from __future__ import annotations

from datetime import timedelta

import pytest

from api import create_app
from api.config import (
    DEV_JWT_SECRET,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    finalize_config,
    get_config,
    parse_duration,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30s", timedelta(seconds=30)),
        ("90", timedelta(seconds=90)),
        (" 5 m ", timedelta(minutes=5)),
        (timedelta(minutes=1), timedelta(minutes=1)),
    ],
)
def test_parse_duration(raw, expected) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "15x", "-5m", "1.5h", "m"])
def test_parse_duration_rejects_garbage(raw) -> None:
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_get_config_by_name() -> None:
    assert get_config("production") is ProductionConfig
    assert get_config("prod") is ProductionConfig
    assert get_config("test") is TestingConfig
    assert get_config("testing") is TestingConfig
    assert get_config("development") is DevelopmentConfig
    assert get_config("anything-else") is DevelopmentConfig


def _config(**overrides) -> dict:
    config = {
        "APP_ENV": "development",
        "JWT_SECRET": "a-long-enough-secret-value",
        "JWT_ACCESS_EXPIRATION": "15m",
        "JWT_REFRESH_EXPIRATION": "7d",
        "TOKEN_SWEEP_INTERVAL_SECONDS": 3600,
    }
    config.update(overrides)
    return config


def test_finalize_derives_lifetimes() -> None:
    config = _config()
    finalize_config(config)
    assert config["JWT_ACCESS_LIFETIME"] == timedelta(minutes=15)
    assert config["JWT_REFRESH_LIFETIME"] == timedelta(days=7)


def test_finalize_rejects_short_secret() -> None:
    with pytest.raises(ValueError, match="at least 16"):
        finalize_config(_config(JWT_SECRET="short"))


def test_finalize_rejects_dev_secret_in_production() -> None:
    with pytest.raises(ValueError, match="production"):
        finalize_config(_config(APP_ENV="production", JWT_SECRET=DEV_JWT_SECRET))
    # accepted outside production
    finalize_config(_config(JWT_SECRET=DEV_JWT_SECRET))


@pytest.mark.parametrize(
    "overrides",
    [
        {"JWT_ACCESS_EXPIRATION": "soon"},
        {"JWT_REFRESH_EXPIRATION": "7w"},
        {"TOKEN_SWEEP_INTERVAL_SECONDS": 0},
    ],
)
def test_finalize_rejects_bad_values(overrides) -> None:
    with pytest.raises(ValueError):
        finalize_config(_config(**overrides))


def test_create_app_refuses_bad_config(tmp_path) -> None:
    with pytest.raises(ValueError):
        create_app("test", {"DATABASE_URL": f"sqlite:///{tmp_path / 'x.db'}", "JWT_SECRET": "short"})


def test_testing_config(app) -> None:
    assert app.testing
    assert app.config["APP_ENV"] == "test"
    assert app.config["TOKEN_SWEEP_ENABLED"] is False
    assert app.config["JWT_ACCESS_LIFETIME"] == timedelta(minutes=15)
