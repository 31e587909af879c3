"""Tests for category endpoints"""
import pytest
from flask.testing import FlaskClient

from conftest import bearer


@pytest.fixture
def headers(register) -> dict:
    return bearer(register()["accessToken"])


def create_category(client: FlaskClient, headers: dict, name: str) -> dict:
    response = client.post("/api/v1/categories", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]


def test_create_category_requires_authentication(client: FlaskClient):
    response = client.post("/api/v1/categories", json={"name": "Strategy"})
    assert response.status_code == 401


def test_create_category(client: FlaskClient, headers: dict):
    category = create_category(client, headers, " Strategy ")
    assert category["name"] == "Strategy"
    assert category["gameIds"] == []


def test_create_category_duplicate_name(client: FlaskClient, headers: dict):
    create_category(client, headers, "Strategy")
    response = client.post("/api/v1/categories", json={"name": "STRATEGY"}, headers=headers)
    assert response.status_code == 409


def test_create_category_validation(client: FlaskClient, headers: dict):
    response = client.post("/api/v1/categories", json={"name": "x" * 65}, headers=headers)
    assert response.status_code == 422
    response = client.post("/api/v1/categories", json={}, headers=headers)
    assert response.status_code == 422


def test_list_categories_is_public(client: FlaskClient, headers: dict):
    for name in ("Strategy", "Party", "Co-op"):
        create_category(client, headers, name)

    response = client.get("/api/v1/categories")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert [c["name"] for c in data["items"]] == ["Co-op", "Party", "Strategy"]
    assert data["meta"]["total"] == 3

    response = client.get("/api/v1/categories?sort=-name&q=t")
    assert [c["name"] for c in response.get_json()["data"]["items"]] == ["Strategy", "Party"]

    assert client.get("/api/v1/categories?sort=created_at").status_code == 400


def test_games_in_category_are_visible_to_their_owner_only(client: FlaskClient, register, headers: dict):
    category = create_category(client, headers, "Strategy")
    game = client.post(
        "/api/v1/games", json={"name": "Catan", "categoryIds": [category["id"]]}, headers=headers
    ).get_json()["data"]

    url = f"/api/v1/categories/{category['id']}"
    assert client.get(url).get_json()["data"]["gameIds"] == []
    assert client.get(url, headers=bearer("garbage")).status_code == 200
    assert client.get(url, headers=headers).get_json()["data"]["gameIds"] == [game["id"]]

    other = bearer(register(email="b@x.com")["accessToken"])
    assert client.get(url, headers=other).get_json()["data"]["gameIds"] == []


def test_get_category_not_found(client: FlaskClient):
    response = client.get("/api/v1/categories/missing")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_update_category(client: FlaskClient, headers: dict):
    category = create_category(client, headers, "Strategy")
    create_category(client, headers, "Party")

    response = client.put(f"/api/v1/categories/{category['id']}", json={"name": "Strategy Games"}, headers=headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["name"] == "Strategy Games"

    response = client.put(f"/api/v1/categories/{category['id']}", json={"name": "party"}, headers=headers)
    assert response.status_code == 409


def test_delete_category_keeps_games(client: FlaskClient, headers: dict):
    category = create_category(client, headers, "Strategy")
    game = client.post(
        "/api/v1/games", json={"name": "Catan", "categoryIds": [category["id"]]}, headers=headers
    ).get_json()["data"]

    response = client.delete(f"/api/v1/categories/{category['id']}", headers=headers)
    assert response.status_code == 204
    assert client.get(f"/api/v1/categories/{category['id']}").status_code == 404

    response = client.get(f"/api/v1/games/{game['id']}", headers=headers)
    assert response.status_code == 200
    assert response.get_json()["data"]["categories"] == []


def test_search_treats_wildcards_literally(client: FlaskClient, headers: dict):
    create_category(client, headers, "100% Fun")
    create_category(client, headers, "1000 Fun")

    response = client.get("/api/v1/categories", query_string={"q": "%"})
    assert [c["name"] for c in response.get_json()["data"]["items"]] == ["100% Fun"]

    response = client.get("/api/v1/categories", query_string={"q": "0_"})
    assert response.get_json()["data"]["items"] == []
