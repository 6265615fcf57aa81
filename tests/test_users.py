from .conftest import doctor_data, register


class TestProfile:

    def test_get_profile(self, client, patient):
        response = client.get("/api/users/profile", headers=patient["headers"])
        assert response.status_code == 200

        user = response.json()["user"]
        assert user["email"] == "amina@example.com"
        assert user["allergies"] == []

    def test_update_patient_profile(self, client, patient):
        response = client.put(
            "/api/users/profile",
            json={
                "phone": "+254711111111",
                "bloodType": "O+",
                "allergies": ["Penicillin"],
                "dateOfBirth": "1990-04-12",
                "specialty": "Surgery",
            },
            headers=patient["headers"]
        )
        assert response.status_code == 200

        user = response.json()["user"]
        assert user["phone"] == "+254711111111"
        assert user["bloodType"] == "O+"
        assert user["allergies"] == ["Penicillin"]
        assert user["dateOfBirth"] == "1990-04-12"
        # Doctor-only field is ignored for patients
        assert user["specialty"] is None

    def test_update_doctor_profile_ignores_blank_specialty(self, client, doctor):
        response = client.put(
            "/api/users/profile",
            json={"specialty": "", "yearsOfExperience": 15},
            headers=doctor["headers"]
        )
        assert response.status_code == 200

        user = response.json()["user"]
        assert user["specialty"] == "Cardiology"
        assert user["yearsOfExperience"] == 15

    def test_invalid_blood_type(self, client, patient):
        response = client.put(
            "/api/users/profile",
            json={"bloodType": "Z+"},
            headers=patient["headers"]
        )
        assert response.status_code == 422


class TestAvailability:

    availability = {
        "monday": {"enabled": True, "start": "09:00", "end": "17:00"},
        "saturday": {"enabled": False},
    }

    def test_doctor_updates_availability(self, client, doctor):
        response = client.put(
            "/api/users/availability",
            json={"availability": self.availability},
            headers=doctor["headers"]
        )
        assert response.status_code == 200

        availability = response.json()["user"]["availability"]
        assert availability["monday"] == {"enabled": True, "start": "09:00", "end": "17:00"}
        assert availability["saturday"]["enabled"] is False

    def test_patient_cannot_update_availability(self, client, patient):
        response = client.put(
            "/api/users/availability",
            json={"availability": self.availability},
            headers=patient["headers"]
        )
        assert response.status_code == 403
        assert response.json()["message"] == "User role patient is not authorized to access this route"

    def test_invalid_time(self, client, doctor):
        response = client.put(
            "/api/users/availability",
            json={"availability": {"monday": {"enabled": True, "start": "25:00", "end": "17:00"}}},
            headers=doctor["headers"]
        )
        assert response.status_code == 422


class TestDoctors:

    def _add_doctor(self, client, email, first_name, specialty):
        return register(client, {
            **doctor_data,
            "email": email,
            "firstName": first_name,
            "specialty": specialty,
        })

    def test_list_doctors(self, client, doctor, patient):
        self._add_doctor(client, "carol@example.com", "Carol", "Dermatology")

        response = client.get("/api/doctors")
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["count"] == 2
        assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}
        assert {d["firstName"] for d in data["doctors"]} == {"Brian", "Carol"}

    def test_filter_by_specialty(self, client, doctor):
        self._add_doctor(client, "carol@example.com", "Carol", "Dermatology")

        response = client.get("/api/doctors", params={"specialty": "Dermatology"})
        doctors = response.json()["doctors"]
        assert [d["firstName"] for d in doctors] == ["Carol"]

        response = client.get("/api/doctors", params={"specialty": "all"})
        assert response.json()["count"] == 2

    def test_search(self, client, doctor):
        self._add_doctor(client, "carol@example.com", "Carol", "Dermatology")

        response = client.get("/api/doctors", params={"search": "kam"})
        assert [d["lastName"] for d in response.json()["doctors"]] == ["Kamau", "Kamau"]

        response = client.get("/api/doctors", params={"search": "derma"})
        assert [d["firstName"] for d in response.json()["doctors"]] == ["Carol"]

    def test_pagination(self, client, doctor):
        self._add_doctor(client, "carol@example.com", "Carol", "Dermatology")
        self._add_doctor(client, "dan@example.com", "Dan", "Pediatrics")

        response = client.get("/api/doctors", params={"page": 2, "limit": 2})
        data = response.json()
        assert len(data["doctors"]) == 1
        assert data["pagination"]["pages"] == 2

    def test_get_doctor(self, client, doctor):
        response = client.get(f"/api/doctors/{doctor['user']['id']}")
        assert response.status_code == 200
        assert response.json()["doctor"]["specialty"] == "Cardiology"

    def test_get_doctor_not_found(self, client, patient):
        response = client.get(f"/api/doctors/{patient['user']['id']}")
        assert response.status_code == 404
        assert response.json()["message"] == "Doctor not found"

    def test_specialties(self, client, doctor):
        self._add_doctor(client, "carol@example.com", "Carol", "Dermatology")
        self._add_doctor(client, "dan@example.com", "Dan", "Cardiology")

        response = client.get("/api/doctors/specialties/list")
        assert response.status_code == 200
        assert response.json()["specialties"] == ["Cardiology", "Dermatology"]
