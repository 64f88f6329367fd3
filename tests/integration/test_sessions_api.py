"""Session listing and termination through the API."""

import uuid

from tests.integration.helpers import API, bearer, register


async def test_list_own_sessions(client):
    tokens = await register(client, "mia@example.com", device_info="Pixel 8")

    response = await client.get(f"{API}/sessions", headers=bearer(tokens))

    assert response.status_code == 200
    [session] = response.json()
    assert session["session_id"] == tokens["session_id"]
    assert session["device_info"] == "Pixel 8"
    assert "refresh_token_hash" not in session


async def test_terminate_own_session(client):
    tokens = await register(client, "mia@example.com")
    other = (
        await client.post(
            f"{API}/auth/login",
            json={"email_or_phone": "mia@example.com", "password": "s3cret-pass"},
        )
    ).json()

    response = await client.delete(f"{API}/sessions/{tokens['session_id']}", headers=bearer(other))

    assert response.status_code == 200
    assert (await client.get(f"{API}/sessions", headers=bearer(tokens))).status_code == 401
    remaining = (await client.get(f"{API}/sessions", headers=bearer(other))).json()
    assert [s["session_id"] for s in remaining] == [other["session_id"]]


async def test_terminate_missing_session_is_not_an_error(client):
    tokens = await register(client, "mia@example.com")
    response = await client.delete(f"{API}/sessions/{uuid.uuid4()}", headers=bearer(tokens))
    assert response.status_code == 200


async def test_cannot_terminate_someone_elses_session(client):
    mia = await register(client, "mia@example.com")
    leo = await register(client, "leo@example.com")

    response = await client.delete(f"{API}/sessions/{mia['session_id']}", headers=bearer(leo))

    assert response.status_code == 403
    assert (await client.get(f"{API}/sessions", headers=bearer(mia))).status_code == 200


async def test_admin_can_list_and_terminate(client, admin_headers):
    mia = await register(client, "mia@example.com")

    listed = await client.get(f"{API}/sessions/user/{mia['user_id']}", headers=admin_headers)
    assert [s["session_id"] for s in listed.json()] == [mia["session_id"]]

    response = await client.delete(f"{API}/sessions/{mia['session_id']}", headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get(f"{API}/sessions", headers=bearer(mia))).status_code == 401


async def test_non_admin_cannot_list_others(client):
    mia = await register(client, "mia@example.com")
    leo = await register(client, "leo@example.com")

    response = await client.get(f"{API}/sessions/user/{mia['user_id']}", headers=bearer(leo))

    assert response.status_code == 403
    assert response.json()["error"] == "FORBIDDEN"


async def test_terminate_all_sessions(client):
    first = await register(client, "mia@example.com")
    second = (
        await client.post(
            f"{API}/auth/login",
            json={"email_or_phone": "mia@example.com", "password": "s3cret-pass"},
        )
    ).json()

    response = await client.delete(f"{API}/sessions", headers=bearer(second))

    assert response.json()["detail"] == "Terminated 2 session(s)"
    for tokens in (first, second):
        assert (await client.get(f"{API}/sessions", headers=bearer(tokens))).status_code == 401
