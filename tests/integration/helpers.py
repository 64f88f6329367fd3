"""HTTP helpers for the API tests."""

API = "/api/v1"


async def register(client, email, password="s3cret-pass", **extra):
    response = await client.post(
        f"{API}/auth/register", json={"email": email, "password": password, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(tokens: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens['access_token']}"}
