"""
Shared test fixtures - SQLite test database, test client, auth helpers, AI payloads.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set JWT_SECRET before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["GEMINI_API_KEY"] = ""

from portal.database import Base, get_db
from portal.main import app
from portal.routers import ai_quote


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    ai_quote._prompt_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _register(client, email):
    response = client.post("/api/auth/register", json={
        "email": email,
        "password": "strongpassword123",
        "full_name": "Test Homeowner",
    })
    assert response.status_code == 200
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    """Register a test user and return auth headers."""
    return _register(client, "owner@example.com")


@pytest.fixture
def other_headers(client):
    """A second, unrelated user."""
    return _register(client, "landlord@example.com")


@pytest.fixture
def ai_payload():
    """A realistic AI quote payload for a leaking kitchen faucet."""
    return {
        "analysis": "Cartridge failure in a single-handle kitchen faucet; supply lines corroded.",
        "work_needed": ["Replace faucet cartridge", "Replace both supply lines"],
        "labor_hours": 2.5,
        "materials": [
            {"item": "Faucet cartridge", "estimated_cost": 45.0, "notes": "Moen 1225"},
            {"item": "Braided supply lines (pair)", "estimated_cost": 24.5},
        ],
        "cost_range_min": 250.0,
        "cost_range_max": 400.0,
        "complexity": "simple",
        "considerations": ["Shutoff valves may need replacement if seized"],
        "timeline_days": 1,
        "confidence_level": "high",
    }


@pytest.fixture
def project_form():
    return {
        "title": "Leaky kitchen faucet",
        "description": "Drips constantly, worse with hot water.",
        "service_type": "plumbing",
        "urgency": "normal",
        "photo_urls": ["https://files.example.com/faucet-1.jpg"],
    }
