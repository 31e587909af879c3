"""Tests for game endpoints"""
import pytest
from flask.testing import FlaskClient

from conftest import bearer


@pytest.fixture
def owner(register) -> dict:
    return register()


@pytest.fixture
def headers(owner: dict) -> dict:
    return bearer(owner["accessToken"])


@pytest.fixture
def category_ids(client: FlaskClient, headers: dict) -> list:
    ids = []
    for name in ("Strategy", "Co-op"):
        response = client.post("/api/v1/categories", json={"name": name}, headers=headers)
        ids.append(response.get_json()["data"]["id"])
    return ids


def create_game(client: FlaskClient, headers: dict, **payload) -> dict:
    payload.setdefault("name", "Catan")
    response = client.post("/api/v1/games", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()["data"]


def test_games_require_authentication(client: FlaskClient):
    assert client.get("/api/v1/games").status_code == 401
    assert client.post("/api/v1/games", json={"name": "Catan"}).status_code == 401


def test_create_game(client: FlaskClient, owner: dict, headers: dict, category_ids: list):
    game = create_game(
        client, headers,
        name="Catan", additionalInfo={"players": "3-4"}, categoryIds=category_ids,
    )
    assert game["name"] == "Catan"
    assert game["additionalInfo"] == {"players": "3-4"}
    assert game["userId"] == owner["user"]["id"]
    assert sorted(c["id"] for c in game["categories"]) == sorted(category_ids)
    assert game["createdAt"]


def test_create_game_validation(client: FlaskClient, headers: dict):
    response = client.post("/api/v1/games", json={"name": "  "}, headers=headers)
    assert response.status_code == 422
    response = client.post("/api/v1/games", json={"name": "Catan", "additionalInfo": "text"}, headers=headers)
    assert response.status_code == 422
    assert "additionalInfo" in response.get_json()["errors"]


def test_create_game_unknown_category(client: FlaskClient, headers: dict):
    response = client.post("/api/v1/games", json={"name": "Catan", "categoryIds": ["nope"]}, headers=headers)
    assert response.status_code == 400


def test_list_games_only_returns_own(client: FlaskClient, register, headers: dict):
    create_game(client, headers, name="Catan")
    create_game(client, headers, name="Carcassonne")
    other = register(email="b@x.com")
    create_game(client, bearer(other["accessToken"]), name="Chess")

    response = client.get("/api/v1/games", headers=headers)
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["meta"]["total"] == 2
    assert {g["name"] for g in data["items"]} == {"Catan", "Carcassonne"}


def test_list_games_filters(client: FlaskClient, headers: dict, category_ids: list):
    create_game(client, headers, name="Catan", categoryIds=[category_ids[0]])
    create_game(client, headers, name="Pandemic", categoryIds=[category_ids[1]])

    response = client.get(f"/api/v1/games?category_id={category_ids[1]}", headers=headers)
    assert [g["name"] for g in response.get_json()["data"]["items"]] == ["Pandemic"]

    response = client.get("/api/v1/games?q=cat", headers=headers)
    assert [g["name"] for g in response.get_json()["data"]["items"]] == ["Catan"]

    response = client.get("/api/v1/games?limit=1&page=2", headers=headers)
    data = response.get_json()["data"]
    assert len(data["items"]) == 1
    assert data["meta"] == {"page": 2, "limit": 1, "total": 2}


def test_other_users_game_is_not_found(client: FlaskClient, register, headers: dict):
    game = create_game(client, headers)
    other = bearer(register(email="b@x.com")["accessToken"])

    assert client.get(f"/api/v1/games/{game['id']}", headers=other).status_code == 404
    assert client.put(f"/api/v1/games/{game['id']}", json={"name": "Mine"}, headers=other).status_code == 404
    assert client.delete(f"/api/v1/games/{game['id']}", headers=other).status_code == 404
    assert client.get(f"/api/v1/games/{game['id']}", headers=headers).status_code == 200


def test_update_game(client: FlaskClient, headers: dict, category_ids: list):
    game = create_game(client, headers, categoryIds=[category_ids[0]])

    response = client.put(
        f"/api/v1/games/{game['id']}",
        json={"name": "Catan: Seafarers", "categoryIds": [category_ids[1]]},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.get_json()["data"]
    assert updated["name"] == "Catan: Seafarers"
    assert [c["id"] for c in updated["categories"]] == [category_ids[1]]

    response = client.patch(f"/api/v1/games/{game['id']}", json={"additionalInfo": {"year": 1997}}, headers=headers)
    assert response.status_code == 200
    patched = response.get_json()["data"]
    assert patched["name"] == "Catan: Seafarers"
    assert patched["additionalInfo"] == {"year": 1997}


def test_delete_game(client: FlaskClient, headers: dict, category_ids: list):
    game = create_game(client, headers, categoryIds=category_ids)

    response = client.delete(f"/api/v1/games/{game['id']}", headers=headers)
    assert response.status_code == 200
    body = response.get_json()
    assert body["message"] == "Game removed"
    assert body["data"] is None

    assert client.get(f"/api/v1/games/{game['id']}", headers=headers).status_code == 404
    # Categories survive the game
    assert client.get(f"/api/v1/categories/{category_ids[0]}").status_code == 200


def test_add_and_remove_categories(client: FlaskClient, headers: dict, category_ids: list):
    game = create_game(client, headers)
    url = f"/api/v1/games/{game['id']}/categories"

    response = client.post(url, json={"categoryIds": category_ids}, headers=headers)
    assert response.status_code == 200
    assert len(response.get_json()["data"]["categories"]) == 2

    # Adding an already linked category is a no-op
    response = client.post(url, json={"categoryIds": [category_ids[0]]}, headers=headers)
    assert len(response.get_json()["data"]["categories"]) == 2

    response = client.delete(f"{url}/{category_ids[0]}", headers=headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.get_json()["data"]["categories"]] == [category_ids[1]]

    response = client.delete(f"{url}/{category_ids[0]}", headers=headers)
    assert response.status_code == 404


def test_add_categories_requires_list(client: FlaskClient, headers: dict):
    game = create_game(client, headers)
    response = client.post(f"/api/v1/games/{game['id']}/categories", json={}, headers=headers)
    assert response.status_code == 422


def test_search_treats_underscore_literally(client: FlaskClient, headers: dict):
    create_game(client, headers, name="Ticket_to_Ride")
    create_game(client, headers, name="Ticketstory")

    response = client.get("/api/v1/games", query_string={"q": "t_t"}, headers=headers)
    assert [g["name"] for g in response.get_json()["data"]["items"]] == ["Ticket_to_Ride"]

    response = client.get("/api/v1/games", query_string={"q": "%"}, headers=headers)
    assert response.get_json()["data"]["items"] == []
