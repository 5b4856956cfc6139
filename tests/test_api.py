"""Tests for the HTTP API."""

import json
import uuid

import pytest

from app.client.autosave import AutosaveReconciler
from app.client.delta import Delta
from app.client.scheduler import ManualScheduler
from app.domains.access.roles import RoleLevel


class TestAuthentication:
    """Test sign-up, login and bearer token handling."""

    @pytest.mark.asyncio
    async def test_signup_and_login(self, client):
        response = await client.post("/users", json={
            "name": "Jane Doe", "email": "jane@example.com", "password": "correct-horse"
        })
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "jane@example.com"
        assert "password_hash" not in body

        response = await client.post("/auth/login", json={
            "email": "jane@example.com", "password": "correct-horse"
        })
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = await client.get("/documents", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_bad_login(self, client):
        response = await client.post("/auth/login", json={
            "email": "nobody@example.com", "password": "whatever1"
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/documents")
        assert response.status_code == 401
        assert response.json() == {"message": "Authentication token required"}

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get("/documents", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "DocShare API"


class TestDocumentRoutes:
    """Test /documents routes."""

    @pytest.mark.asyncio
    async def test_create(self, client, factory, headers_for):
        owner = await factory.user()

        response = await client.post("/documents", headers=headers_for(owner), json={
            "title": "Plan", "content": "body", "type": "plain",
            "visibility": "role", "threshold": 2,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Plan"
        assert body["content"] == "body"
        assert body["visibility"] == "role"
        assert body["threshold"] == 2
        assert body["owner_id"] == str(owner.id)

    @pytest.mark.asyncio
    async def test_create_with_blank_title(self, client, factory, headers_for):
        owner = await factory.user()
        response = await client.post("/documents", headers=headers_for(owner), json={"title": " "})
        assert response.status_code == 400
        assert response.json()["errors"] == ["title: Title cannot be empty"]

    @pytest.mark.asyncio
    async def test_schema_errors_use_validation_shape(self, client, factory, headers_for):
        owner = await factory.user()

        response = await client.post("/documents", headers=headers_for(owner), json={
            "title": "Plan", "visibility": "secret"
        })
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0].startswith("visibility:")

        response = await client.post("/documents", headers=headers_for(owner), json={"content": ""})
        assert response.status_code == 400
        assert body.keys() == response.json().keys()
        assert response.json()["errors"][0].startswith("title:")

    @pytest.mark.asyncio
    async def test_quill_content_must_be_a_delta(self, client, factory, headers_for):
        owner = await factory.user()

        response = await client.post("/documents", headers=headers_for(owner), json={
            "title": "Notes", "content": "hello world"
        })
        assert response.status_code == 400
        assert response.json()["errors"] == ["content: Quill content must be a serialized delta"]

        response = await client.post("/documents", headers=headers_for(owner), json={
            "title": "Notes", "content": json.dumps({"ops": [{"insert": "hello world"}]})
        })
        assert response.status_code == 201
        reconciler = AutosaveReconciler(None, ManualScheduler(), document=response.json())
        assert reconciler.contents == Delta().insert("hello world")

    @pytest.mark.asyncio
    async def test_null_content_is_rejected(self, client, factory, headers_for):
        owner = await factory.user()
        document = await factory.document(owner, content="precious")

        response = await client.put(
            f"/documents/{document.id}", headers=headers_for(owner), json={"content": None}
        )
        assert response.status_code == 400

        response = await client.get(f"/documents/{document.id}", headers=headers_for(owner))
        assert response.json()["content"] == "precious"

    @pytest.mark.asyncio
    async def test_list_shape(self, client, factory, headers_for):
        owner = await factory.user(name="Alice Smith")
        for index in range(3):
            await factory.document(owner, title=f"Doc {index}")

        response = await client.get("/documents?limit=2", headers=headers_for(owner))

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"list", "metadata"}
        assert body["metadata"] == {
            "current_page": 1, "page_size": 2, "total_count": 3, "total_pages": 2
        }
        assert [item["title"] for item in body["list"]] == ["Doc 2", "Doc 1"]
        assert "content" not in body["list"][0]
        assert body["list"][0]["owner"] == {
            "id": str(owner.id), "name": "Alice Smith", "role_level": RoleLevel.REGULAR
        }

    @pytest.mark.asyncio
    async def test_limit_bounds(self, client, factory, headers_for):
        owner = await factory.user()
        assert (await client.get("/documents?limit=0", headers=headers_for(owner))).status_code == 400
        assert (await client.get("/documents?limit=101", headers=headers_for(owner))).status_code == 400
        response = await client.get("/documents?offset=-1", headers=headers_for(owner))
        assert response.status_code == 400
        assert response.json()["errors"][0].startswith("offset:")

    @pytest.mark.asyncio
    async def test_query_routes_to_search(self, client, factory, headers_for):
        owner = await factory.user()
        await factory.document(owner, title="Annual Report")
        await factory.document(owner, title="Minutes")

        response = await client.get("/documents", params={"query": "report"}, headers=headers_for(owner))
        assert [item["title"] for item in response.json()["list"]] == ["Annual Report"]

        response = await client.get("/documents", params={"query": "   "}, headers=headers_for(owner))
        assert response.json()["metadata"]["total_count"] == 2

    @pytest.mark.asyncio
    async def test_retrieve(self, client, factory, headers_for):
        owner = await factory.user()
        document = await factory.document(owner, content="full body")

        response = await client.get(f"/documents/{document.id}", headers=headers_for(owner))

        assert response.status_code == 200
        assert response.json()["content"] == "full body"

    @pytest.mark.asyncio
    async def test_malformed_and_unknown_ids(self, client, factory, headers_for):
        owner = await factory.user()

        response = await client.get("/documents/not-an-id", headers=headers_for(owner))
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid ID"}

        response = await client.get(f"/documents/{uuid.uuid4()}", headers=headers_for(owner))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_private_document_is_forbidden_to_others(self, client, factory, headers_for):
        owner = await factory.user()
        stranger = await factory.user()
        admin = await factory.user(role_level=RoleLevel.ADMIN)
        document = await factory.document(owner, visibility="private")

        assert (await client.get(f"/documents/{document.id}", headers=headers_for(stranger))).status_code == 403
        assert (await client.get(f"/documents/{document.id}", headers=headers_for(admin))).status_code == 200

    @pytest.mark.asyncio
    async def test_role_document_threshold(self, client, factory, headers_for):
        owner = await factory.user()
        regular = await factory.user()
        document = await factory.document(owner, visibility="role", threshold=RoleLevel.ADMIN)

        response = await client.get(f"/documents/{document.id}", headers=headers_for(regular))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_partial_update(self, client, factory, headers_for):
        owner = await factory.user()
        document = await factory.document(owner, title="Draft", visibility="public", content="keep")

        response = await client.put(
            f"/documents/{document.id}", headers=headers_for(owner), json={"title": "Final"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Final"
        assert body["visibility"] == "public"
        assert body["content"] == "keep"

    @pytest.mark.asyncio
    async def test_only_owner_or_admin_may_modify(self, client, factory, headers_for):
        owner = await factory.user()
        stranger = await factory.user()
        admin = await factory.user(role_level=RoleLevel.ADMIN)
        document = await factory.document(owner, visibility="public")

        response = await client.put(
            f"/documents/{document.id}", headers=headers_for(stranger), json={"title": "Mine"}
        )
        assert response.status_code == 403

        response = await client.delete(f"/documents/{document.id}", headers=headers_for(stranger))
        assert response.status_code == 403

        response = await client.delete(f"/documents/{document.id}", headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json() == {"message": "Document deleted successfully"}

        response = await client.get(f"/documents/{document.id}", headers=headers_for(owner))
        assert response.status_code == 404


class TestUserRoutes:
    """Test /users routes."""

    @pytest.mark.asyncio
    async def test_user_documents(self, client, factory, headers_for):
        owner = await factory.user()
        viewer = await factory.user()
        await factory.document(owner, title="Shared", visibility="public")
        await factory.document(owner, title="Hidden", visibility="private")

        response = await client.get(f"/users/{owner.id}/documents", headers=headers_for(viewer))

        assert response.status_code == 200
        assert [item["title"] for item in response.json()["list"]] == ["Shared"]

    @pytest.mark.asyncio
    async def test_user_documents_errors(self, client, factory, headers_for):
        viewer = await factory.user()
        gone = await factory.user(deleted=True)

        response = await client.get("/users/123/documents", headers=headers_for(viewer))
        assert response.status_code == 400

        response = await client.get(f"/users/{uuid.uuid4()}/documents", headers=headers_for(viewer))
        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

        response = await client.get(f"/users/{gone.id}/documents", headers=headers_for(viewer))
        assert response.status_code == 404
        assert response.json() == {"message": "This user has been deleted"}

    @pytest.mark.asyncio
    async def test_delete_user(self, client, factory, headers_for):
        user = await factory.user()
        other = await factory.user()

        response = await client.delete(f"/users/{user.id}", headers=headers_for(other))
        assert response.status_code == 403

        response = await client.delete(f"/users/{user.id}", headers=headers_for(user))
        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}

        response = await client.get(f"/users/{user.id}/documents", headers=headers_for(other))
        assert response.status_code == 404
