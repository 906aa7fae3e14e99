from __future__ import annotations

from models.schemas.common import MAX_PAGE
from tests._helpers.auth import bearer, register_user


def _create(client, headers, name: str, **extra) -> dict:
    r = client.post("/api/tags", headers=headers, json={"name": name, **extra})
    assert r.status_code == 201, r.get_json()
    return r.get_json()["data"]


def test_crud_round(client, headers) -> None:
    tag = _create(client, headers, "python")
    assert tag["name"] == "python"
    assert tag["description"] is None

    r = client.put(f"/api/tags/{tag['id']}", headers=headers, json={"name": "py", "description": "Snakes"})
    assert r.status_code == 200
    assert r.get_json()["data"]["name"] == "py"

    r = client.get(f"/api/tags/{tag['id']}", headers=headers)
    assert r.get_json()["data"]["description"] == "Snakes"

    r = client.delete(f"/api/tags/{tag['id']}", headers=headers)
    assert r.get_json() == {"message": "Tag deleted successfully"}
    assert client.get(f"/api/tags/{tag['id']}", headers=headers).status_code == 404


def test_list_sorted_by_name(client, headers) -> None:
    for name in ("web", "api", "python"):
        _create(client, headers, name)
    items = client.get("/api/tags", headers=headers).get_json()["data"]["items"]
    assert [t["name"] for t in items] == ["api", "python", "web"]


def test_limit_is_clamped(client, headers) -> None:
    _create(client, headers, "one")
    pagination = client.get("/api/tags?limit=500&page=0", headers=headers).get_json()["data"]["pagination"]
    assert pagination == {"total": 1, "page": 1, "limit": 50, "pages": 1}


def test_non_numeric_paging_is_rejected(client, headers) -> None:
    r = client.get("/api/tags?page=first", headers=headers)
    assert r.status_code == 400
    assert r.get_json()["error"]["type"] == "VALIDATION_ERROR"


def test_duplicate_and_reactivation(client, headers) -> None:
    tag = _create(client, headers, "python")
    assert client.post("/api/tags", headers=headers, json={"name": "python"}).status_code == 409

    client.delete(f"/api/tags/{tag['id']}", headers=headers)
    again = _create(client, headers, "python")
    assert again["id"] == tag["id"]


def test_ids_and_ownership(client, headers) -> None:
    tag = _create(client, headers, "python")
    r = client.get("/api/tags/-1", headers=headers)
    assert r.get_json()["error"]["message"] == "Invalid tag ID"
    r = client.get("/api/tags/12345", headers=headers)
    assert r.get_json()["error"]["message"] == "Tag not found"

    bob = bearer(register_user(client, username="bob")["accessToken"])
    assert client.get(f"/api/tags/{tag['id']}", headers=bob).status_code == 404


def test_huge_page_is_clamped(client, headers) -> None:
    _create(client, headers, "one")
    r = client.get(f"/api/tags?page={10**30}", headers=headers)
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["items"] == []
    assert data["pagination"]["page"] == MAX_PAGE
