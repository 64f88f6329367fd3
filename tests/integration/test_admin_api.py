"""
Admin and account endpoints: user status, deletion, roles and KYC review.
"""

import uuid

from tests.integration.helpers import API, bearer, register


class TestUsers:
    async def test_me(self, client):
        tokens = await register(client, "mia@example.com")

        response = await client.get(f"{API}/users/me", headers=bearer(tokens))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == tokens["user_id"]
        assert body["roles"] == []
        assert body["is_email_verified"] is False

    async def test_suspend_logs_user_out(self, client, admin_headers):
        mia = await register(client, "mia@example.com")

        response = await client.patch(
            f"{API}/users/{mia['user_id']}/status",
            json={"account_status": "SUSPENDED"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["account_status"] == "SUSPENDED"
        assert (await client.get(f"{API}/users/me", headers=bearer(mia))).status_code == 401

        login = await client.post(
            f"{API}/auth/login",
            json={"email_or_phone": "mia@example.com", "password": "s3cret-pass"},
        )
        assert login.status_code == 403
        assert login.json()["error"] == "ACCOUNT_RESTRICTED"

    async def test_unban_is_rejected(self, client, admin_headers):
        mia = await register(client, "mia@example.com")
        url = f"{API}/users/{mia['user_id']}/status"
        await client.patch(url, json={"account_status": "BANNED"}, headers=admin_headers)

        response = await client.patch(url, json={"account_status": "ACTIVE"}, headers=admin_headers)

        assert response.status_code == 400

    async def test_status_needs_admin(self, client):
        mia = await register(client, "mia@example.com")
        response = await client.patch(
            f"{API}/users/{mia['user_id']}/status",
            json={"account_status": "ACTIVE"},
            headers=bearer(mia),
        )
        assert response.status_code == 403

    async def test_delete_user(self, client, admin_headers):
        mia = await register(client, "mia@example.com")

        response = await client.delete(f"{API}/users/{mia['user_id']}", headers=admin_headers)

        assert response.status_code == 200
        missing = await client.delete(f"{API}/users/{mia['user_id']}", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["error"] == "USER_NOT_FOUND"


class TestRoles:
    async def test_select_own_role(self, client):
        mia = await register(client, "mia@example.com")

        response = await client.post(
            f"{API}/roles/me", json={"role_name": "HOST"}, headers=bearer(mia),
        )

        assert response.status_code == 200
        assert response.json()["roles"] == ["HOST"]
        mine = await client.get(f"{API}/roles/me", headers=bearer(mia))
        assert mine.json() == {"user_id": mia["user_id"], "roles": ["HOST"]}

    async def test_cannot_self_assign_admin(self, client):
        mia = await register(client, "mia@example.com")
        response = await client.post(
            f"{API}/roles/me", json={"role_name": "ADMIN"}, headers=bearer(mia),
        )
        assert response.status_code == 403

    async def test_admin_assigns_and_removes(self, client, admin_headers):
        mia = await register(client, "mia@example.com")
        base = f"{API}/roles/user/{mia['user_id']}"

        assigned = await client.post(base, json={"role_name": "BRAND"}, headers=admin_headers)
        assert assigned.status_code == 200
        duplicate = await client.post(base, json={"role_name": "BRAND"}, headers=admin_headers)
        assert duplicate.status_code == 400
        assert (await client.get(base, headers=admin_headers)).json()["roles"] == ["BRAND"]

        removed = await client.delete(f"{base}/BRAND", headers=admin_headers)
        assert removed.status_code == 200
        assert (await client.get(base, headers=admin_headers)).json()["roles"] == []

    async def test_assign_to_unknown_user(self, client, admin_headers):
        response = await client.post(
            f"{API}/roles/user/{uuid.uuid4()}", json={"role_name": "HOST"}, headers=admin_headers,
        )
        assert response.status_code == 404


class TestKyc:
    async def test_submit_and_review(self, client, admin, admin_headers):
        mia = await register(client, "mia@example.com")

        submitted = await client.post(
            f"{API}/kyc/submit",
            json={"document_type": "PASSPORT", "document_url": "https://files/p.jpg"},
            headers=bearer(mia),
        )
        assert submitted.status_code == 201
        doc_id = submitted.json()["document_id"]
        assert submitted.json()["status"] == "PENDING"

        pending = await client.get(f"{API}/kyc/pending", headers=admin_headers)
        assert [d["document_id"] for d in pending.json()] == [doc_id]

        approved = await client.post(f"{API}/kyc/{doc_id}/approve", headers=admin_headers)
        assert approved.status_code == 200

        doc = (await client.get(f"{API}/kyc/{doc_id}", headers=bearer(mia))).json()
        assert doc["status"] == "APPROVED"
        assert doc["reviewer_id"] == str(admin.id)
        assert (await client.get(f"{API}/kyc/pending", headers=admin_headers)).json() == []

    async def test_reject_needs_reason(self, client, admin_headers):
        mia = await register(client, "mia@example.com")
        doc_id = (
            await client.post(
                f"{API}/kyc/submit",
                json={"document_type": "NATIONAL_ID", "document_url": "https://files/id.jpg"},
                headers=bearer(mia),
            )
        ).json()["document_id"]

        blank = await client.post(
            f"{API}/kyc/{doc_id}/reject", json={"reason": "  "}, headers=admin_headers,
        )
        assert blank.status_code == 400

        rejected = await client.post(
            f"{API}/kyc/{doc_id}/reject", json={"reason": "Unreadable"}, headers=admin_headers,
        )
        assert rejected.status_code == 200
        docs = (await client.get(f"{API}/kyc/user/{mia['user_id']}", headers=bearer(mia))).json()
        assert docs[0]["status"] == "REJECTED"
        assert docs[0]["rejection_reason"] == "Unreadable"

    async def test_documents_are_private(self, client):
        mia = await register(client, "mia@example.com")
        leo = await register(client, "leo@example.com")
        doc_id = (
            await client.post(
                f"{API}/kyc/submit",
                json={"document_type": "PASSPORT", "document_url": "https://files/p.jpg"},
                headers=bearer(mia),
            )
        ).json()["document_id"]

        assert (await client.get(f"{API}/kyc/{doc_id}", headers=bearer(leo))).status_code == 403
        assert (
            await client.get(f"{API}/kyc/user/{mia['user_id']}", headers=bearer(leo))
        ).status_code == 403
        assert (await client.get(f"{API}/kyc/pending", headers=bearer(leo))).status_code == 403
