from typing import Any, Dict

from ..http import ApiClient


class AuthService:
    def __init__(self, api: ApiClient):
        self.api = api

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.post("/auth/register", json=data)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.api.post("/auth/login", json={"email": email, "password": password})

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        return self.api.post("/auth/refresh", json={"refreshToken": refresh_token})

    def logout(self, refresh_token: str) -> Dict[str, Any]:
        return self.api.post("/auth/logout", json={"refreshToken": refresh_token})

    def me(self) -> Dict[str, Any]:
        return self.api.get("/auth/me")
