import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from kromium.main import app  # noqa: E402
from kromium.core.database import get_db, get_redis, Base  # noqa: E402
from kromium.services.chat_service import get_chat_client  # noqa: E402

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeRedis:
    """The subset of redis commands used by the rate limiter; expiry is ignored."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, seconds, value):
        self.data[key] = str(value)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


class FakeChatClient:
    def __init__(self, reply="Drink plenty of water and rest.", error=None):
        self.reply = reply
        self.error = error
        self.messages = []

    async def complete(self, message):
        self.messages.append(message)
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def fake_redis():
    redis_client = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: redis_client
    # No provider unless a test installs one
    app.dependency_overrides[get_chat_client] = lambda: None
    yield redis_client
    app.dependency_overrides.pop(get_redis, None)
    app.dependency_overrides.pop(get_chat_client, None)


@pytest.fixture
def chat_client():
    fake = FakeChatClient()
    app.dependency_overrides[get_chat_client] = lambda: fake
    return fake


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


# Test data
patient_data = {
    "firstName": "Amina",
    "lastName": "Odhiambo",
    "email": "amina@example.com",
    "password": "secret123",
    "role": "patient",
    "phone": "+254700000001",
}

doctor_data = {
    "firstName": "Brian",
    "lastName": "Kamau",
    "email": "brian@example.com",
    "password": "secret123",
    "role": "doctor",
    "phone": "+254700000002",
    "specialty": "Cardiology",
    "licenseNumber": "KMPDC-1234",
    "yearsOfExperience": 12,
    "medicalSchool": "University of Nairobi",
}


def register(client, data):
    response = client.post("/api/auth/register", json=data)
    assert response.status_code == 201, response.json()
    body = response.json()
    body["headers"] = {"Authorization": f"Bearer {body['token']}"}
    return body


@pytest.fixture
def patient(client):
    return register(client, patient_data)


@pytest.fixture
def doctor(client):
    return register(client, doctor_data)
