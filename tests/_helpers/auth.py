from __future__ import annotations

from flask.testing import FlaskClient


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_user(
    client: FlaskClient,
    *,
    username: str = "alice",
    email: str | None = None,
    password: str = "password123",
) -> dict:
    r = client.post(
        "/api/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )
    assert r.status_code == 201, r.get_json()
    return r.get_json()["data"]


def login_user(client: FlaskClient, *, username: str = "alice", password: str = "password123") -> dict:
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.get_json()
    return r.get_json()["data"]
