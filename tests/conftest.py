from __future__ import annotations

import pytest

from api import create_app
from tests._helpers.auth import bearer, register_user

TEST_JWT_SECRET = "test-secret-0123456789abcdef0123456789"


@pytest.fixture()
def app(tmp_path):
    app = create_app(
        "test",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
            "JWT_SECRET": TEST_JWT_SECRET,
        },
    )
    yield app
    app.extensions["storage"].dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    return app.extensions["storage"]


@pytest.fixture()
def refresh_tokens(app):
    return app.extensions["refresh_tokens"]


@pytest.fixture()
def alice(client) -> dict:
    """Registered user: {"user", "accessToken", "refreshToken"}."""
    return register_user(client, username="alice")


@pytest.fixture()
def headers(alice) -> dict[str, str]:
    return bearer(alice["accessToken"])
