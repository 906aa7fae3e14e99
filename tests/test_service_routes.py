from __future__ import annotations

from sqlalchemy.exc import OperationalError

from api.errors import _internal_details, error_response
from utils.tokens import RefreshTokenStore


def test_health(client) -> None:
    r = client.get("/")
    assert r.status_code == 200
    assert r.get_json() == {
        "status": "OK",
        "message": "Bookmark Management API is running",
        "environment": "test",
    }


def test_welcome(client) -> None:
    body = client.get("/api").get_json()
    assert body["message"] == "Welcome to the Bookmark Management API"
    assert body["docs"] == "/apidocs/"


def test_swagger_spec_lists_routes(client) -> None:
    r = client.get("/swagger.json")
    assert r.status_code == 200
    paths = r.get_json()["paths"]
    assert "/api/auth/login" in paths
    assert "/api/bookmarks/{bookmark_id}" in paths


def test_unknown_route_uses_error_envelope(client) -> None:
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.get_json() == {"error": {"type": "NOT_FOUND", "message": "Resource not found"}}


def test_wrong_method_is_bad_request_type(client) -> None:
    r = client.get("/api/auth/login")
    assert r.status_code == 405
    assert r.get_json()["error"]["type"] == "BAD_REQUEST"


def test_cors_preflight(client) -> None:
    r = client.options(
        "/api/bookmarks",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["Access-Control-Allow-Origin"] in {"*", "http://localhost:5173"}


def test_error_details_only_outside_production(app) -> None:
    with app.app_context():
        assert _internal_details(RuntimeError("boom")) == {"type": "RuntimeError", "message": "boom"}
        app.config["EXPOSE_ERROR_DETAILS"] = False
        assert _internal_details(RuntimeError("boom")) is None

        response, status = error_response("CONFLICT", "Taken", 409, details={"name": ["dup"]})
        assert status == 409
        assert response.get_json() == {"error": {"type": "CONFLICT", "message": "Taken", "details": {"name": ["dup"]}}}


def test_database_errors_are_internal(client, monkeypatch) -> None:
    def broken(self, token, now=None):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(RefreshTokenStore, "verify", broken)
    r = client.post("/api/auth/refresh-token", json={"refreshToken": "abc"})
    assert r.status_code == 500
    assert r.get_json()["error"]["type"] == "INTERNAL_ERROR"
    assert r.get_json()["error"]["message"] == "Internal server error"
