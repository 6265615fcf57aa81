from typing import Any, Dict

from ..http import ApiClient


class ChatService:
    def __init__(self, api: ApiClient):
        self.api = api

    def send(self, message: str) -> Dict[str, Any]:
        return self.api.post("/chat", json={"message": message})

    def send_guest(self, message: str) -> Dict[str, Any]:
        return self.api.post("/chat/guest", json={"message": message})

    def history(self) -> Dict[str, Any]:
        return self.api.get("/chat/history")

    def clear_history(self) -> Dict[str, Any]:
        return self.api.delete("/chat/history")

    def health(self) -> Dict[str, Any]:
        return self.api.get("/chat/health")
