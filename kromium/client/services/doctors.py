from typing import Any, Dict, Optional

from ..http import ApiClient


class DoctorService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_doctors(
        self,
        specialty: Optional[str] = None,
        search: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """Doctors sorted by rating; unset filters are left out of the query."""
        params = {"specialty": specialty, "search": search, "page": page, "limit": limit}
        return self.api.get("/doctors", params={k: v for k, v in params.items() if v})

    def get_doctor(self, doctor_id: int) -> Dict[str, Any]:
        return self.api.get(f"/doctors/{doctor_id}")

    def list_specialties(self) -> Dict[str, Any]:
        return self.api.get("/doctors/specialties/list")
