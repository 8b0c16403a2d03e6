# tests/test_api_locations.py
from __future__ import annotations

from fastapi.testclient import TestClient

from app.models.category import Category, CategoryType


def add(c: TestClient, type_: str, value: str):
    return c.post("/api/addLocation", json={"type": type_, "value": value})


def remove(c: TestClient, type_: str, value: str):
    return c.post("/api/removeLocation", json={"type": type_, "value": value})


def test_locations_lifecycle(client: TestClient):
    assert client.get("/api/getLocations").json() == {"horizontal": [], "vertical": []}

    r = add(client, "horizontal", "B")
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["location"]["type"] == "horizontal"
    assert body["location"]["value"] == "B"
    assert add(client, "horizontal", "A").status_code == 201
    assert add(client, "vertical", "1").status_code == 201

    assert client.get("/api/getLocations").json() == {"horizontal": ["A", "B"], "vertical": ["1"]}

    r = remove(client, "horizontal", "B")
    assert r.status_code == 200, r.text
    assert r.json()["message"]
    assert client.get("/api/getLocations").json()["horizontal"] == ["A"]


def test_add_location_errors(client: TestClient):
    assert add(client, "horizontal", "").status_code == 400
    assert client.post("/api/addLocation", json={"value": "A"}).status_code == 400
    assert add(client, "sideways", "A").status_code == 400
    assert add(client, "horizontal", "A").status_code == 201
    dup = add(client, "horizontal", "A")
    assert dup.status_code == 400
    assert "exists" in dup.json()["detail"]


def test_remove_location_in_use(client: TestClient):
    add(client, "horizontal", "A")
    add(client, "vertical", "1")
    proposal = client.post("/api/generateSKU", json={"column": "A", "row": "1", "category": "ELEC"}).json()
    saved = client.post(
        "/api/saveSKU", json={"sku": proposal["sku"], "column": "A", "row": "1", "category": "ELEC"}
    ).json()["sku"]

    r = remove(client, "horizontal", "A")
    assert r.status_code == 400
    assert "in use" in r.json()["detail"]

    client.put(f"/api/updateSKU/{saved['id']}", json={"column": "", "row": ""})
    assert remove(client, "horizontal", "A").status_code == 200


def test_remove_missing_location(client: TestClient):
    assert remove(client, "vertical", "99").status_code == 404
    assert remove(client, "vertical", "").status_code == 400


def test_get_categories(client: TestClient, session_factory):
    with session_factory() as db:
        db.add_all(
            [
                Category(friendly_name="Electronics", code="ELEC", type=CategoryType.category),
                Category(friendly_name="Cables", code="CBL", type=CategoryType.subcategory),
            ]
        )
        db.commit()

    r = client.get("/api/getCategories")
    assert r.status_code == 200, r.text
    assert r.json() == [
        {"friendlyName": "Electronics", "code": "ELEC", "type": "category"},
        {"friendlyName": "Cables", "code": "CBL", "type": "subcategory"},
    ]
    sub = client.get("/api/getCategories", params={"type": "subcategory"}).json()
    assert [c["code"] for c in sub] == ["CBL"]
    assert client.get("/api/getCategories", params={"type": "brand"}).status_code == 400
