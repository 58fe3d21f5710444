# tests/test_e2e_profile.py

import os
import time

import httpx
import pytest

BASE_URL = os.getenv("E2E_BASE_URL", "http://localhost:8000")


def unique_user(prefix):
    ts = str(int(time.time() * 1000))
    return {
        "first_name": prefix.capitalize(),
        "last_name": "Tester",
        "email": f"{prefix}_{ts}@example.com",
        "password": f"{prefix}_testpass",
    }


async def ensure_user(client, creds):
    """
    Tries to register a new user.
    If the email is already taken, logs in instead.
    Returns an access token.
    """
    resp = await client.post(
        f"{BASE_URL}/api/auth/register",
        json={**creds, "confirm_password": creds["password"]},
    )
    if resp.status_code == 201:
        return resp.json()["access_token"]

    resp = await client.post(
        f"{BASE_URL}/api/auth/login",
        json={"email": creds["email"], "password": creds["password"]},
    )
    return resp.json()["access_token"]


@pytest.mark.e2e
@pytest.mark.asyncio
@pytest.mark.skipif(
    not os.getenv("RUN_E2E_TESTS"), reason="E2E tests skipped unless RUN_E2E_TESTS=1"
)
async def test_profile_edit_and_revert_against_live_server():
    """
    Full e2e test:
    - Register a fan.
    - Change the first name.
    - Revert the change.
    - A second revert of the same change is rejected.
    """
    creds = unique_user("e2e_fan")

    async with httpx.AsyncClient() as client:
        token = await ensure_user(client, creds)
        headers = {"Authorization": f"Bearer {token}"}

        resp = await client.put(
            f"{BASE_URL}/api/users/profile",
            json={"first_name": "Renamed"},
            headers=headers,
        )
        assert resp.status_code == 200
        change_id = resp.json()["changes"][0]["id"]

        revert_url = f"{BASE_URL}/api/users/profile/history/{change_id}/revert"
        resp = await client.post(revert_url, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["profile"]["first_name"] == creds["first_name"]

        resp = await client.post(revert_url, headers=headers)
        assert resp.status_code == 400

        resp = await client.get(f"{BASE_URL}/api/users/profile/history", headers=headers)
        history = resp.json()
        assert [h["revertible"] for h in history] == [False, True]
