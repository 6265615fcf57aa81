from datetime import datetime

import pytest

from kromium.client.health_score import (
    BASE_SCORE, blood_pressure_delta, compute_health_score
)

NOW = datetime(2025, 10, 18, 12, 0)

healthy = {"bloodPressure": "118/76", "heartRate": 72, "bmi": 22.0}


class TestHealthScore:

    def test_normal_metrics_beat_base(self):
        assert compute_health_score(healthy, [], now=NOW) > BASE_SCORE

    def test_all_good_with_recent_checkup(self):
        appointments = [{"appointmentDate": "2025-08-01"}]
        assert compute_health_score(healthy, appointments, now=NOW) == 100

    def test_no_data_is_base(self):
        assert compute_health_score(None, [], now=NOW) == BASE_SCORE
        assert compute_health_score({}, [], now=NOW) == BASE_SCORE

    def test_poor_metrics(self):
        metrics = {"bloodPressure": "165/105", "heartRate": 130, "bmi": 34.0}
        assert compute_health_score(metrics, [], now=NOW) == 75 - 15 - 10 - 10

    @pytest.mark.parametrize("reading,delta", [
        ("120/80", 10),
        ("90/60", 10),
        ("130/85", -5),
        ("139/89", -5),
        ("140/85", -15),
        ("85/55", -15),
        ("not a reading", 0),
        (None, 0),
    ])
    def test_blood_pressure_bands(self, reading, delta):
        assert blood_pressure_delta(reading) == delta

    def test_heart_rate_bounds(self):
        assert compute_health_score({"heartRate": 60}, now=NOW) == 80
        assert compute_health_score({"heartRate": 100}, now=NOW) == 80
        assert compute_health_score({"heartRate": 101}, now=NOW) == 65

    def test_bmi_from_weight_and_height(self):
        assert compute_health_score({"weight": 70, "height": 175}, now=NOW) == 80
        assert compute_health_score({"weight": 110, "height": 175}, now=NOW) == 65

    def test_unreadable_numbers_count_as_missing(self):
        metrics = {"heartRate": "fast", "bmi": "n/a", "weight": "heavy", "height": "tall"}
        assert compute_health_score(metrics, now=NOW) == BASE_SCORE
        assert compute_health_score({"heartRate": [72], "bmi": float("nan")}, now=NOW) == BASE_SCORE

    def test_numeric_strings_are_read(self):
        assert compute_health_score({"heartRate": "72", "weight": "70", "height": "175"}, now=NOW) == 85

    def test_snake_case_keys(self):
        metrics = {"blood_pressure": "118/76", "heart_rate": 72, "bmi": 22.0}
        assert compute_health_score(metrics, [{"appointment_date": "2025-10-01"}], now=NOW) == 100

    def test_old_or_future_appointments_do_not_count(self):
        appointments = [{"appointmentDate": "2024-01-10"}, {"appointmentDate": "2025-12-01"}]
        assert compute_health_score(healthy, appointments, now=NOW) == 95

    def test_clamped(self):
        score = compute_health_score(
            {"bloodPressure": "250/150", "heartRate": 200, "bmi": 60}, [], now=NOW
        )
        assert 0 <= score <= 100
