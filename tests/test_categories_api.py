from __future__ import annotations

from tests._helpers.auth import bearer, register_user


def _create(client, headers, name: str, **extra) -> dict:
    r = client.post("/api/categories", headers=headers, json={"name": name, **extra})
    assert r.status_code == 201, r.get_json()
    return r.get_json()["data"]


def test_create_and_get(client, alice, headers) -> None:
    created = _create(client, headers, "  Reading ", description="Articles")
    assert created["name"] == "Reading"
    assert created["description"] == "Articles"
    assert created["user_id"] == alice["user"]["id"]

    r = client.get(f"/api/categories/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.get_json() == {"message": "Resource retrieved successfully", "data": created}


def test_list_is_sorted_and_paginated(client, headers) -> None:
    for name in ("zeta", "alpha", "mu"):
        _create(client, headers, name)

    r = client.get("/api/categories", headers=headers)
    data = r.get_json()["data"]
    assert [c["name"] for c in data["items"]] == ["alpha", "mu", "zeta"]
    assert data["pagination"] == {"total": 3, "page": 1, "limit": 10, "pages": 1}

    r = client.get("/api/categories?page=2&limit=2", headers=headers)
    data = r.get_json()["data"]
    assert [c["name"] for c in data["items"]] == ["zeta"]
    assert data["pagination"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}


def test_duplicate_name_conflicts(client, headers) -> None:
    _create(client, headers, "Reading")
    r = client.post("/api/categories", headers=headers, json={"name": "Reading"})
    assert r.status_code == 409
    assert r.get_json()["error"]["type"] == "CONFLICT"


def test_names_are_per_user(client, headers) -> None:
    _create(client, headers, "Reading")
    bob = register_user(client, username="bob")
    _create(client, bearer(bob["accessToken"]), "Reading")


def test_validation(client, headers) -> None:
    r = client.post("/api/categories", headers=headers, json={"name": "   "})
    assert r.status_code == 400
    assert "name" in r.get_json()["error"]["details"]

    r = client.post("/api/categories", headers=headers, json={"name": "x" * 51})
    assert r.status_code == 400


def test_update(client, headers) -> None:
    created = _create(client, headers, "Reading")
    r = client.put(f"/api/categories/{created['id']}", headers=headers, json={"description": "Long reads"})
    assert r.status_code == 200
    assert r.get_json()["data"]["description"] == "Long reads"
    assert r.get_json()["data"]["name"] == "Reading"

    r = client.put(f"/api/categories/{created['id']}", headers=headers, json={})
    assert r.status_code == 400


def test_rename_onto_existing_name_conflicts(client, headers) -> None:
    first = _create(client, headers, "Reading")
    _create(client, headers, "Music")
    r = client.put(f"/api/categories/{first['id']}", headers=headers, json={"name": "Music"})
    assert r.status_code == 409


def test_delete_hides_category(client, headers) -> None:
    created = _create(client, headers, "Reading")
    r = client.delete(f"/api/categories/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.get_json() == {"message": "Category deleted successfully"}

    assert client.get(f"/api/categories/{created['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/categories/{created['id']}", headers=headers).status_code == 404
    items = client.get("/api/categories", headers=headers).get_json()["data"]["items"]
    assert items == []


def test_recreating_deleted_name_reactivates(client, headers) -> None:
    created = _create(client, headers, "Reading", description="old")
    client.delete(f"/api/categories/{created['id']}", headers=headers)

    again = _create(client, headers, "Reading", description="new")
    assert again["id"] == created["id"]
    assert again["description"] == "new"


def test_rename_onto_deleted_name(client, headers) -> None:
    old = _create(client, headers, "Reading")
    client.delete(f"/api/categories/{old['id']}", headers=headers)
    other = _create(client, headers, "Books")

    r = client.put(f"/api/categories/{other['id']}", headers=headers, json={"name": "Reading"})
    assert r.status_code == 200
    assert r.get_json()["data"]["name"] == "Reading"


def test_ids_and_ownership(client, headers) -> None:
    created = _create(client, headers, "Reading")

    r = client.get("/api/categories/abc", headers=headers)
    assert r.status_code == 400
    assert r.get_json()["error"] == {"type": "BAD_REQUEST", "message": "Invalid category ID"}

    r = client.get("/api/categories/999", headers=headers)
    assert r.status_code == 404
    assert r.get_json()["error"] == {"type": "NOT_FOUND", "message": "Category not found"}

    bob = bearer(register_user(client, username="bob")["accessToken"])
    assert client.get(f"/api/categories/{created['id']}", headers=bob).status_code == 404
    assert client.put(f"/api/categories/{created['id']}", headers=bob, json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/categories/{created['id']}", headers=bob).status_code == 404
    assert client.get("/api/categories", headers=bob).get_json()["data"]["items"] == []


def test_requires_auth(client) -> None:
    assert client.get("/api/categories").status_code == 401
    assert client.post("/api/categories", json={"name": "x"}).status_code == 401


def test_id_beyond_bigint_is_bad_request(client, headers) -> None:
    r = client.get("/api/categories/99999999999999999999999", headers=headers)
    assert r.status_code == 400
    assert r.get_json()["error"]["message"] == "Invalid category ID"
