from typing import Any, Dict

from ..http import ApiClient


class AppointmentService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_appointments(self) -> Dict[str, Any]:
        return self.api.get("/appointments")

    def get_appointment(self, appointment_id: int) -> Dict[str, Any]:
        return self.api.get(f"/appointments/{appointment_id}")

    def create_appointment(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.post("/appointments", json=data)

    def update_appointment(self, appointment_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.put(f"/appointments/{appointment_id}", json=data)

    def cancel_appointment(self, appointment_id: int) -> Dict[str, Any]:
        return self.api.delete(f"/appointments/{appointment_id}")

    def list_upcoming(self) -> Dict[str, Any]:
        return self.api.get("/appointments/upcoming/list")
