from typing import Any, Dict

from ..http import ApiClient


class UserService:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_profile(self) -> Dict[str, Any]:
        return self.api.get("/users/profile")

    def update_profile(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.put("/users/profile", json=data)

    def update_availability(self, availability: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.put("/users/availability", json={"availability": availability})
