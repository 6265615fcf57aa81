from pathlib import Path
from typing import Any, Dict, Optional, Union
import mimetypes

from ..http import ApiClient


class MedicalRecordService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_records(self) -> Dict[str, Any]:
        return self.api.get("/medical-records")

    def get_record(self, record_id: int) -> Dict[str, Any]:
        return self.api.get(f"/medical-records/{record_id}")

    def create_record(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.post("/medical-records", json=data)

    def update_record(self, record_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.put(f"/medical-records/{record_id}", json=data)

    def delete_record(self, record_id: int) -> Dict[str, Any]:
        return self.api.delete(f"/medical-records/{record_id}")

    def list_patient_records(self, patient_id: int) -> Dict[str, Any]:
        return self.api.get(f"/medical-records/patient/{patient_id}")

    def upload_record(
        self,
        path: Union[str, Path],
        title: str,
        record_type: str = "Other",
        description: Optional[str] = None
    ) -> Dict[str, Any]:
        """Send a local PDF or image as a new record of the signed-in patient."""
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        data = {"title": title, "type": record_type}
        if description:
            data["description"] = description
        with path.open("rb") as fh:
            return self.api.upload(
                "/medical-records/upload",
                files={"file": (path.name, fh, content_type)},
                data=data,
            )
