"""
Integration tests for the chat session API.
"""

import pytest
from unittest.mock import AsyncMock, patch


class TestChatsAPI:
    """CRUD over /api/chats."""

    def test_full_lifecycle(self, client, session_body):
        response = client.post("/api/chats", json=session_body)
        assert response.status_code == 201
        chat_id = response.json()["id"]

        response = client.get(f"/api/chats/{chat_id}")
        assert response.status_code == 200
        chat = response.json()["chat"]
        assert chat["id"] == chat_id
        assert chat["title"] == "T"
        assert chat["lastMessage"] == "hi"
        assert chat["messages"] == session_body["messages"]
        assert chat["model"] == "gemini-2.0-flash"
        assert "createdAt" in chat and "updatedAt" in chat

        response = client.put("/api/chats", json={"id": chat_id, "title": "T2"})
        assert response.status_code == 200
        assert response.json() == {"id": chat_id}

        chat = client.get(f"/api/chats/{chat_id}").json()["chat"]
        assert chat["title"] == "T2"
        assert chat["lastMessage"] == "hi"
        assert chat["messages"] == session_body["messages"]

        response = client.delete(f"/api/chats/{chat_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Chat deleted successfully"}

        assert client.get(f"/api/chats/{chat_id}").status_code == 404

    def test_create_with_numeric_id(self, client, session_body):
        response = client.post("/api/chats", json={**session_body, "id": 1712345678901})
        assert response.status_code == 201
        assert response.json() == {"id": "1712345678901"}

    def test_create_missing_fields(self, client, session_body):
        body = dict(session_body)
        del body["model"]
        response = client.post("/api/chats", json=body)
        assert response.status_code == 400
        assert "Missing required fields" in response.json()["detail"]

    def test_create_malformed_body_is_400(self, client, session_body):
        body = {**session_body, "messages": [{"role": "llm", "content": "x", "time": "1"}]}
        response = client.post("/api/chats", json=body)
        assert response.status_code == 400

    def test_create_duplicate_id(self, client, session_body):
        assert client.post("/api/chats", json={**session_body, "id": "dup"}).status_code == 201
        response = client.post("/api/chats", json={**session_body, "id": "dup", "title": "New"})
        assert response.status_code == 409
        assert client.get("/api/chats/dup").json()["chat"]["title"] == "T"

    def test_update_unknown_id(self, client, session_body):
        response = client.put("/api/chats", json={**session_body, "id": "ghost"})
        assert response.status_code == 404
        assert client.get("/api/chats").json() == {"chats": []}

    def test_update_without_id(self, client, session_body):
        response = client.put("/api/chats", json=session_body)
        assert response.status_code == 400

    def test_delete_twice(self, client, session_body):
        chat_id = client.post("/api/chats", json=session_body).json()["id"]
        assert client.delete(f"/api/chats/{chat_id}").status_code == 200
        assert client.delete(f"/api/chats/{chat_id}").status_code == 404

    def test_list_ordered_by_recent_update(self, client, session_body):
        client.post("/api/chats", json={**session_body, "id": "a"})
        client.post("/api/chats", json={**session_body, "id": "b"})
        client.put("/api/chats", json={"id": "a", "title": "A2"})
        client.put("/api/chats", json={"id": "b", "title": "B2"})

        response = client.get("/api/chats")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()["chats"]] == ["b", "a"]

    def test_store_failure_is_500(self, client, store, session_body):
        store.storage.save = AsyncMock(return_value=False)
        response = client.post("/api/chats", json=session_body)
        assert response.status_code == 500
        assert response.json()["detail"] == "Error creating chat"

    def test_unreadable_chat_is_500(self, client, session_body):
        chat_id = client.post("/api/chats", json=session_body).json()["id"]
        with patch("aiofiles.open", side_effect=PermissionError("denied")):
            response = client.get(f"/api/chats/{chat_id}")
        assert response.status_code == 500
        assert response.json()["detail"] == "Error fetching chat"


class TestAppEndpoints:
    """Tests for basic app endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["app"] == "NOVA Chat"
        assert data["status"] == "running"

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


def test_store_not_initialized_raises():
    from nova.storage import session_store

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(session_store, "_session_store", None)
        with pytest.raises(RuntimeError, match="not initialized"):
            session_store.get_session_store()
