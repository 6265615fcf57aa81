from typing import Any, Dict

from ..http import ApiClient


class HealthMetricService:
    def __init__(self, api: ApiClient):
        self.api = api

    def record_metrics(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.api.post("/health-metrics", json=data)

    def latest(self) -> Dict[str, Any]:
        """Raises ApiError with status 404 when nothing was recorded yet."""
        return self.api.get("/health-metrics/latest")

    def history(self) -> Dict[str, Any]:
        return self.api.get("/health-metrics/history")
