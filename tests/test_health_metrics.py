readings = {
    "bloodPressure": "118/76",
    "heartRate": 72,
    "weight": 70,
    "height": 175,
    "temperature": 36.6,
    "cholesterol": {"total": 180, "hdl": 55, "ldl": 100},
}


class TestHealthMetrics:

    def test_latest_is_404_when_empty(self, client, patient):
        response = client.get("/api/health-metrics/latest", headers=patient["headers"])
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "No health metrics found"}

    def test_record_computes_bmi(self, client, patient):
        response = client.post(
            "/api/health-metrics",
            json={**readings, "bmi": 99},
            headers=patient["headers"]
        )
        assert response.status_code == 200

        metrics = response.json()["metrics"]
        assert metrics["bmi"] == 22.9
        assert metrics["cholesterol"] == {"total": 180.0, "hdl": 55.0, "ldl": 100.0}
        assert metrics["lastUpdated"]

    def test_latest_returns_newest_reading(self, client, patient):
        client.post("/api/health-metrics", json=readings, headers=patient["headers"])
        client.post(
            "/api/health-metrics",
            json={**readings, "heartRate": 88},
            headers=patient["headers"]
        )

        response = client.get("/api/health-metrics/latest", headers=patient["headers"])
        assert response.status_code == 200
        assert response.json()["metrics"]["heartRate"] == 88

        response = client.get("/api/health-metrics/history", headers=patient["headers"])
        data = response.json()
        assert data["count"] == 2
        assert [m["heartRate"] for m in data["metrics"]] == [88, 72]

    def test_readings_are_per_user(self, client, patient, doctor):
        client.post("/api/health-metrics", json=readings, headers=patient["headers"])

        response = client.get("/api/health-metrics/latest", headers=doctor["headers"])
        assert response.status_code == 404

    def test_validation(self, client, patient):
        for field, value in (
            ("bloodPressure", "high"),
            ("heartRate", 250),
            ("weight", 5),
            ("height", 300),
            ("temperature", 45),
        ):
            response = client.post(
                "/api/health-metrics",
                json={**readings, field: value},
                headers=patient["headers"]
            )
            assert response.status_code == 422, field

    def test_requires_authentication(self, client):
        response = client.post("/api/health-metrics", json=readings)
        assert response.status_code == 401
