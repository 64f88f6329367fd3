"""Profile endpoints and their `kind`-tagged request and response bodies."""

from tests.integration.helpers import API, bearer, register


async def test_create_and_fetch_host_profile(client):
    mia = await register(client, "mia@example.com")

    created = await client.post(
        f"{API}/profiles/me",
        json={"kind": "HOST", "display_name": "Mia", "dob": "1996-02-29", "gender": "FEMALE"},
        headers=bearer(mia),
    )

    assert created.status_code == 201, created.text
    body = created.json()
    assert body["kind"] == "HOST"
    assert body["dob"] == "1996-02-29"
    assert body["onboarding_step"] == 0

    fetched = await client.get(f"{API}/profiles/me", headers=bearer(mia))
    assert fetched.json()["id"] == body["id"]
    public = await client.get(f"{API}/profiles/{mia['user_id']}", headers=bearer(mia))
    assert public.json()["display_name"] == "Mia"


async def test_agency_profile(client):
    leo = await register(client, "leo@example.com")

    created = await client.post(
        f"{API}/profiles/me",
        json={"kind": "AGENCY", "company_name": "Star Talent"},
        headers=bearer(leo),
    )

    assert created.status_code == 201
    assert created.json()["agency_code"].startswith("AG-")


async def test_unknown_kind_is_rejected(client):
    mia = await register(client, "mia@example.com")
    response = await client.post(
        f"{API}/profiles/me", json={"kind": "ALIEN"}, headers=bearer(mia),
    )
    assert response.status_code == 422


async def test_underage_host_is_rejected(client):
    mia = await register(client, "mia@example.com")
    response = await client.post(
        f"{API}/profiles/me", json={"kind": "HOST", "dob": "2020-01-01"}, headers=bearer(mia),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "BAD_REQUEST"


async def test_update_and_delete(client):
    mia = await register(client, "mia@example.com")
    await client.post(
        f"{API}/profiles/me", json={"kind": "BRAND", "brand_name": "Acme"}, headers=bearer(mia),
    )

    updated = await client.patch(
        f"{API}/profiles/me", json={"kind": "BRAND", "industry": "Retail"}, headers=bearer(mia),
    )
    assert updated.status_code == 200
    assert updated.json()["brand_name"] == "Acme"
    assert updated.json()["industry"] == "Retail"

    mismatch = await client.patch(
        f"{API}/profiles/me", json={"kind": "HOST", "bio": "hi"}, headers=bearer(mia),
    )
    assert mismatch.status_code == 400

    assert (await client.delete(f"{API}/profiles/me", headers=bearer(mia))).status_code == 200
    assert (await client.get(f"{API}/profiles/me", headers=bearer(mia))).status_code == 404
