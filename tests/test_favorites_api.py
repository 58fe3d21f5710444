import pytest

from conftest import register

FAVORITES = "/api/favorite-teams"


@pytest.mark.asyncio
async def test_favorites_require_authentication(client):
    assert (await client.get(FAVORITES)).status_code == 401


@pytest.mark.asyncio
async def test_add_and_list_favorites(client, auth_headers):
    assert (await client.get(FAVORITES, headers=auth_headers)).json() == []

    resp = await client.post(
        FAVORITES,
        json={"team_id": "psg", "team_name": " Paris Saint-Germain "},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert [f["team_name"] for f in resp.json()] == ["Paris Saint-Germain"]

    await client.post(
        FAVORITES, json={"team_id": "santos", "team_name": "Santos FC"}, headers=auth_headers
    )
    favorites = (await client.get(FAVORITES, headers=auth_headers)).json()
    assert {f["team_id"] for f in favorites} == {"psg", "santos"}


@pytest.mark.asyncio
async def test_duplicate_favorite_is_rejected(client, auth_headers):
    payload = {"team_id": "psg", "team_name": "Paris Saint-Germain"}
    await client.post(FAVORITES, json=payload, headers=auth_headers)

    resp = await client.post(FAVORITES, json=payload, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "This team is already in your favorites"


@pytest.mark.asyncio
async def test_remove_favorite(client, auth_headers):
    await client.post(
        FAVORITES, json={"team_id": "psg", "team_name": "PSG"}, headers=auth_headers
    )

    resp = await client.delete(f"{FAVORITES}/psg", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == []

    # removing again is a no-op
    resp = await client.delete(f"{FAVORITES}/psg", headers=auth_headers)
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_favorites_are_per_user(client, auth_headers):
    other = await register(client, email="jane@example.com", first_name="Jane")
    await client.post(
        FAVORITES, json={"team_id": "psg", "team_name": "PSG"}, headers=auth_headers
    )

    assert (await client.get(FAVORITES, headers=other)).json() == []
    resp = await client.post(
        FAVORITES, json={"team_id": "psg", "team_name": "PSG"}, headers=other
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_blank_favorite_is_rejected(client, auth_headers):
    resp = await client.post(
        FAVORITES, json={"team_id": "  ", "team_name": "PSG"}, headers=auth_headers
    )
    assert resp.status_code == 422
