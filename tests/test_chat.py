from kromium.services.chat_service import (
    BUSY_REPLY, FAILED_REPLY, UNAVAILABLE_REPLY, ChatProviderError
)


class TestChat:

    def test_reply_is_saved_to_history(self, client, patient, chat_client):
        response = client.post(
            "/api/chat",
            json={"message": "  How much water should I drink?  "},
            headers=patient["headers"]
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "reply": chat_client.reply}
        assert chat_client.messages == ["How much water should I drink?"]

        response = client.get("/api/chat/history", headers=patient["headers"])
        messages = response.json()["messages"]
        assert [m["sender"] for m in messages] == ["user", "bot"]
        assert messages[0]["text"] == "How much water should I drink?"
        assert messages[1]["text"] == chat_client.reply

    def test_blank_message(self, client, patient, chat_client):
        response = client.post("/api/chat", json={"message": "   "}, headers=patient["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid message"
        assert chat_client.messages == []

    def test_missing_message(self, client, patient, chat_client):
        response = client.post("/api/chat", json={}, headers=patient["headers"])
        assert response.status_code == 400

    def test_non_string_message(self, client, patient, chat_client):
        response = client.post("/api/chat", json={"message": 123}, headers=patient["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid message"
        assert chat_client.messages == []

    def test_message_too_long(self, client, patient, chat_client):
        response = client.post("/api/chat", json={"message": "a" * 501}, headers=patient["headers"])
        assert response.status_code == 400
        assert response.json()["message"] == "Message too long. Please keep it under 500 characters."

    def test_message_at_limit(self, client, patient, chat_client):
        response = client.post("/api/chat", json={"message": "a" * 500}, headers=patient["headers"])
        assert response.status_code == 200

    def test_provider_not_configured(self, client, patient):
        response = client.post("/api/chat", json={"message": "Hello"}, headers=patient["headers"])
        assert response.status_code == 500
        assert response.json()["reply"] == UNAVAILABLE_REPLY

    def test_provider_rate_limited(self, client, patient, chat_client):
        chat_client.error = ChatProviderError("slow down", status_code=429)

        response = client.post("/api/chat", json={"message": "Hello"}, headers=patient["headers"])
        assert response.status_code == 429
        assert response.json()["reply"] == BUSY_REPLY

    def test_provider_failure(self, client, patient, chat_client):
        chat_client.error = ChatProviderError("boom", status_code=502)

        response = client.post("/api/chat", json={"message": "Hello"}, headers=patient["headers"])
        assert response.status_code == 500
        assert response.json()["reply"] == FAILED_REPLY

        response = client.get("/api/chat/history", headers=patient["headers"])
        assert response.json()["messages"] == []

    def test_requires_authentication(self, client, chat_client):
        response = client.post("/api/chat", json={"message": "Hello"})
        assert response.status_code == 401

    def test_history_is_capped(self, client, patient, chat_client):
        for i in range(51):
            client.post("/api/chat", json={"message": f"question {i}"}, headers=patient["headers"])

        messages = client.get("/api/chat/history", headers=patient["headers"]).json()["messages"]
        assert len(messages) == 100
        assert messages[0]["text"] == "question 1"
        assert messages[-2]["text"] == "question 50"

    def test_clear_history(self, client, patient, chat_client):
        client.post("/api/chat", json={"message": "Hello"}, headers=patient["headers"])

        response = client.delete("/api/chat/history", headers=patient["headers"])
        assert response.status_code == 200
        assert response.json()["message"] == "Chat history cleared successfully"

        response = client.get("/api/chat/history", headers=patient["headers"])
        assert response.json() == {"success": True, "messages": []}

    def test_chat_rate_limit(self, client, patient, chat_client, fake_redis):
        fake_redis.data["rate_limit:chat:testclient"] = "100"

        response = client.post("/api/chat", json={"message": "Hello"}, headers=patient["headers"])
        assert response.status_code == 429
        assert chat_client.messages == []


class TestGuestChat:

    def test_guest_reply_is_not_stored(self, client, chat_client):
        response = client.post("/api/chat/guest", json={"message": "What are your hours?"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "reply": chat_client.reply, "guest": True}

    def test_guest_validation(self, client, chat_client):
        response = client.post("/api/chat/guest", json={"message": ""})
        assert response.status_code == 400

    def test_guest_non_string_message(self, client, chat_client):
        response = client.post("/api/chat/guest", json={"message": ["hi"]})
        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid message"


class TestChatHealth:

    def test_health(self, client):
        response = client.get("/api/chat/health")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Kromium Assistant"
        assert data["status"] in ("operational", "degraded")
        assert isinstance(data["apiKeyConfigured"], bool)
