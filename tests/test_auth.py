import pytest

from .conftest import doctor_data, patient_data

test_login_data = {
    "email": "amina@example.com",
    "password": "secret123"
}


class TestAuthentication:

    def test_register_user(self, client):
        """Test user registration."""
        response = client.post("/api/auth/register", json=patient_data)
        assert response.status_code == 201

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "User registered successfully!"
        assert data["token"]
        assert data["user"]["email"] == patient_data["email"]
        assert data["user"]["role"] == "patient"
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    def test_register_lowercases_email(self, client):
        data = {**patient_data, "email": "Amina@Example.COM"}
        response = client.post("/api/auth/register", json=data)
        assert response.status_code == 201
        assert response.json()["user"]["email"] == "amina@example.com"

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email."""
        client.post("/api/auth/register", json=patient_data)

        response = client.post("/api/auth/register", json=patient_data)
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "User already exists with this email"
        }

    def test_register_invalid_password(self, client):
        """Test registration with a too short password."""
        invalid_data = {**patient_data, "password": "weak"}

        response = client.post("/api/auth/register", json=invalid_data)
        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_register_doctor(self, client):
        response = client.post("/api/auth/register", json=doctor_data)
        assert response.status_code == 201

        user = response.json()["user"]
        assert user["role"] == "doctor"
        assert user["specialty"] == "Cardiology"
        assert user["isVerified"] is True

    def test_register_doctor_without_credentials(self, client):
        data = {**doctor_data, "licenseNumber": None}

        response = client.post("/api/auth/register", json=data)
        assert response.status_code == 400
        assert response.json()["message"] == "All doctor verification fields are required"

    def test_register_admin_role_rejected(self, client):
        response = client.post("/api/auth/register", json={**patient_data, "role": "admin"})
        assert response.status_code == 422

    def test_login_success(self, client):
        """Test successful login."""
        client.post("/api/auth/register", json=patient_data)

        response = client.post("/api/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Login successful!"
        assert "token" in data
        assert "refreshToken" in data
        assert data["tokenType"] == "bearer"
        assert data["user"]["firstName"] == "Amina"

    def test_login_invalid_credentials(self, client):
        """Test login with an unknown email."""
        invalid_login = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = client.post("/api/auth/login", json=invalid_login)
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_login_wrong_password(self, client):
        """Test login with wrong password."""
        client.post("/api/auth/register", json=patient_data)

        wrong_login = {**test_login_data, "password": "wrongpassword"}

        response = client.post("/api/auth/login", json=wrong_login)
        assert response.status_code == 401

    def test_get_current_user(self, client):
        """Register, log in and read the account back."""
        client.post("/api/auth/register", json=patient_data)
        login_response = client.post("/api/auth/login", json=test_login_data)

        token = login_response.json()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == patient_data["email"]

    def test_get_current_user_without_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized to access this route - no token provided"

    def test_get_current_user_invalid_token(self, client):
        """Test get current user with invalid token."""
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_refresh_token_cannot_authenticate(self, client, patient):
        headers = {"Authorization": f"Bearer {patient['refreshToken']}"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token type"

    def test_refresh_token(self, client, patient):
        """Test token refresh."""
        response = client.post(
            "/api/auth/refresh",
            json={"refreshToken": patient["refreshToken"]}
        )
        assert response.status_code == 200

        data = response.json()
        assert "token" in data
        assert data["refreshToken"] != patient["refreshToken"]

    def test_refresh_token_is_single_use(self, client, patient):
        client.post("/api/auth/refresh", json={"refreshToken": patient["refreshToken"]})

        response = client.post(
            "/api/auth/refresh",
            json={"refreshToken": patient["refreshToken"]}
        )
        assert response.status_code == 401

    def test_refresh_invalid_token(self, client):
        """Test refresh with invalid token."""
        response = client.post(
            "/api/auth/refresh",
            json={"refreshToken": "invalid_token"}
        )
        assert response.status_code == 401

    def test_logout(self, client, patient):
        """Logging out revokes the refresh token."""
        response = client.post(
            "/api/auth/logout",
            json={"refreshToken": patient["refreshToken"]}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Successfully logged out"

        response = client.post(
            "/api/auth/refresh",
            json={"refreshToken": patient["refreshToken"]}
        )
        assert response.status_code == 401

    def test_auth_rate_limit(self, client, fake_redis):
        fake_redis.data["rate_limit:auth:testclient"] = "20"

        response = client.post("/api/auth/login", json=test_login_data)
        assert response.status_code == 429
        assert response.json()["success"] is False


class TestApplication:

    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"
        assert "X-Process-Time" in response.headers

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["appointments"] == "/api/appointments"

    def test_api_rate_limit(self, client, fake_redis):
        """Every API route shares one per-IP request budget."""
        response = client.get("/api/doctors")
        assert response.status_code == 200
        assert fake_redis.data["rate_limit:api:testclient"] == "1"

        fake_redis.data["rate_limit:api:testclient"] = "100"

        response = client.get("/api/doctors")
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "message": "Too many requests from this IP, please try again later."
        }
        assert client.get("/api/chat/health").status_code == 429

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Route not found",
            "path": "/api/does-not-exist"
        }


if __name__ == "__main__":
    pytest.main([__file__])
