"""
Scriblink Backend — API Endpoint Tests
========================================

What:  End-to-end HTTP tests through the FastAPI app (ASGITransport).
Why:   Checks the error mapping (status codes and tagged JSON bodies) and that
       the X-User-ID identity reaches the services.
"""

import pytest
from unittest.mock import AsyncMock, patch


async def _register(client, username="alice"):
    response = await client.post(
        "/api/auth/register", json={"username": username, "password": "pw"}
    )
    assert response.status_code == 201
    body = response.json()
    return {"X-User-ID": body["user"]}, body["root_folder"]


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_register_and_login(self, test_client):
        headers, root = await _register(test_client)

        response = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "pw"}
        )

        assert response.status_code == 200
        assert response.json()["user"] == headers["X-User-ID"]

    @pytest.mark.asyncio
    async def test_bad_login_is_401(self, test_client):
        await _register(test_client)

        response = await test_client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "authentication_failed"

    @pytest.mark.asyncio
    async def test_duplicate_username_is_409(self, test_client):
        await _register(test_client)
        response = await test_client.post(
            "/api/auth/register", json={"username": "alice", "password": "pw"}
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_missing_identity_header_is_401(self, test_client):
        response = await test_client.get("/api/folders")
        assert response.status_code == 401


class TestFolderRoutes:

    @pytest.mark.asyncio
    async def test_create_and_move(self, test_client):
        headers, root = await _register(test_client)
        a = (await test_client.post("/api/folders", json={"title": "a"}, headers=headers)).json()
        b = (
            await test_client.post(
                "/api/folders", json={"title": "b", "parent": a["id"]}, headers=headers
            )
        ).json()

        response = await test_client.post(
            f"/api/folders/{b['id']}/move", json={"new_parent": root}, headers=headers
        )

        assert response.status_code == 200
        parent = await test_client.get(f"/api/folders/{b['id']}/parent", headers=headers)
        assert parent.json()["parent"] == root

    @pytest.mark.asyncio
    async def test_cyclic_move_is_409_with_tag(self, test_client):
        headers, root = await _register(test_client)
        a = (await test_client.post("/api/folders", json={"title": "a"}, headers=headers)).json()
        b = (
            await test_client.post(
                "/api/folders", json={"title": "b", "parent": a["id"]}, headers=headers
            )
        ).json()

        response = await test_client.post(
            f"/api/folders/{a['id']}/move", json={"new_parent": b["id"]}, headers=headers
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "structural_violation"
        assert body["details"]["violation"] == "cyclic_move"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_foreign_folder_is_403(self, test_client):
        _, alice_root = await _register(test_client, "alice")
        bob, _ = await _register(test_client, "bob")

        response = await test_client.get(f"/api/folders/{alice_root}", headers=bob)

        assert response.status_code == 403
        assert response.json()["error"] == "permission_denied"

    @pytest.mark.asyncio
    async def test_missing_folder_is_404(self, test_client):
        headers, _ = await _register(test_client)
        response = await test_client.get("/api/folders/ghost", headers=headers)
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_folder_removes_notes(self, test_client):
        headers, _ = await _register(test_client)
        folder = (await test_client.post("/api/folders", json={"title": "a"}, headers=headers)).json()
        note = (
            await test_client.post(
                "/api/notes", json={"title": "n", "folder": folder["id"]}, headers=headers
            )
        ).json()

        response = await test_client.delete(f"/api/folders/{folder['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json()["deleted_items"] == [note["id"]]
        gone = await test_client.get(f"/api/notes/{note['id']}", headers=headers)
        assert gone.status_code == 404


class TestNoteRoutes:

    @pytest.mark.asyncio
    async def test_note_crud(self, test_client):
        headers, root = await _register(test_client)

        created = await test_client.post(
            "/api/notes", json={"title": "Cells", "content": "cells divide"}, headers=headers
        )
        assert created.status_code == 201
        note_id = created.json()["id"]

        renamed = await test_client.put(
            f"/api/notes/{note_id}/title", json={"title": "Mitosis"}, headers=headers
        )
        assert renamed.json()["title"] == "Mitosis"

        listing = await test_client.get("/api/notes", headers=headers)
        assert listing.headers["X-Total-Count"] == "1"

        deleted = await test_client.delete(f"/api/notes/{note_id}", headers=headers)
        assert deleted.json() == {"success": True}

    @pytest.mark.asyncio
    async def test_foreign_note_is_403(self, test_client):
        alice, _ = await _register(test_client, "alice")
        bob, _ = await _register(test_client, "bob")
        note = (await test_client.post("/api/notes", json={}, headers=alice)).json()

        response = await test_client.get(f"/api/notes/{note['id']}", headers=bob)

        assert response.status_code == 403


class TestTagRoutes:

    @pytest.mark.asyncio
    async def test_tag_lifecycle(self, test_client):
        headers, _ = await _register(test_client)
        note = (await test_client.post("/api/notes", json={}, headers=headers)).json()

        tagged = await test_client.post(
            "/api/tags", json={"label": "exam", "item": note["id"]}, headers=headers
        )
        assert tagged.status_code == 201
        tag_id = tagged.json()["id"]

        again = await test_client.post(
            "/api/tags", json={"label": "exam", "item": note["id"]}, headers=headers
        )
        assert again.status_code == 409

        refs = await test_client.get(f"/api/notes/{note['id']}/tags", headers=headers)
        assert refs.json() == [{"tag_id": tag_id, "label": "exam"}]

        removed = await test_client.delete(f"/api/tags/{tag_id}/items/{note['id']}", headers=headers)
        assert removed.status_code == 200

        not_tagged = await test_client.delete(
            f"/api/tags/{tag_id}/items/{note['id']}", headers=headers
        )
        assert not_tagged.status_code == 400


class TestSummaryRoutes:

    @pytest.mark.asyncio
    async def test_validate_endpoint_reports_reason(self, test_client):
        response = await test_client.post(
            "/api/summaries/validate",
            json={
                "source": "Mitosis splits one cell into two identical daughter cells.",
                "summary": "Revenue grew.",
            },
        )

        body = response.json()
        assert response.status_code == 200
        assert body["accepted"] is False
        assert body["reason"] == "low_relevance"
        assert "0.0%" in body["message"]

    @pytest.mark.asyncio
    async def test_manual_summary_round_trip(self, test_client):
        headers, _ = await _register(test_client)
        note = (await test_client.post("/api/notes", json={}, headers=headers)).json()

        put = await test_client.put(
            f"/api/summaries/{note['id']}", json={"summary": "Short."}, headers=headers
        )
        assert put.status_code == 200

        got = await test_client.get(f"/api/summaries/{note['id']}", headers=headers)
        assert got.json() == {"item": note["id"], "summary": "Short."}

    @pytest.mark.asyncio
    async def test_generation_for_empty_note_is_400(self, test_client):
        headers, _ = await _register(test_client)
        note = (await test_client.post("/api/notes", json={}, headers=headers)).json()

        response = await test_client.post(f"/api/summaries/{note['id']}/generate", headers=headers)

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "text"

    @pytest.mark.asyncio
    async def test_rejected_generation_is_422(self, test_client):
        headers, _ = await _register(test_client)
        note = (
            await test_client.post(
                "/api/notes",
                json={"content": "Mitosis splits one cell into two identical daughter cells."},
                headers=headers,
            )
        ).json()

        with patch(
            "scriblink.services.summary_service.summary_service._generator"
        ) as generator:
            generator.generate = AsyncMock(return_value="As an AI, mitosis.")
            response = await test_client.post(
                f"/api/summaries/{note['id']}/generate", headers=headers
            )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "summary_rejected"
        assert body["details"]["reason"] == "meta_language"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        with patch(
            "scriblink.services.gemini_service.gemini_summarizer.health_check",
            AsyncMock(return_value=True),
        ):
            response = await test_client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["database"] == "connected"
        assert body["status"] == "healthy"
