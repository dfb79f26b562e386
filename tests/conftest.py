"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from places_api.database import Base, get_db  # noqa: E402
from places_api.main import app  # noqa: E402
from places_api.services.geocoding import (  # noqa: E402
    Coordinates,
    GeocodingService,
    get_geocoding_service,
)
from places_api.services.images import ImageStore, get_image_store  # noqa: E402
from places_api.services.store import RecordStore  # noqa: E402

EMPIRE_STATE = Coordinates(lat=40.7484474, lng=-73.9871516)


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeGeocoder(GeocodingService):
    """Resolves every address to the same coordinates."""

    def __init__(self, coordinates: Coordinates = EMPIRE_STATE):
        super().__init__(api_key="test-key")
        self.coordinates = coordinates
        self.addresses: list[str] = []

    async def get_coordinates(self, address: str) -> Coordinates:
        self.addresses.append(address)
        return self.coordinates


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/places", "/places_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from places_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def store(db):
    """Record store bound to the test session."""
    return RecordStore(db)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def uploads_dir(tmp_path):
    path = tmp_path / "uploads" / "images"
    path.mkdir(parents=True)
    return path


@pytest.fixture(scope="function")
def client(db, geocoder, uploads_dir):
    """Create a test client with database, geocoder and image store overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geocoding_service] = lambda: geocoder
    app.dependency_overrides[get_image_store] = lambda: ImageStore(uploads_dir)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, name: str, email: str, password: str = "secret1") -> AuthHeaders:
    """Sign a user up and return bearer headers for them."""
    response = client.post(
        "/api/users/signup",
        json={"name": name, "email": email, "password": password, "image": "avatar.png"},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"}, user_id=data["userId"], email=data["email"]
    )


@pytest.fixture
def signup_user(client):
    """Factory fixture: sign up a user and get their auth headers."""

    def _signup(name: str, email: str, password: str = "secret1") -> AuthHeaders:
        return signup(client, name, email, password)

    return _signup


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup(client, "Test User", "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second user who does not own the first user's places."""
    return signup(client, "Other User", "other@example.com")


@pytest.fixture
def place_payload():
    return {
        "title": "Empire State Building",
        "description": "One of the most famous buildings in the world",
        "address": "20 W 34th St, New York, NY 10001",
        "image": "empire.png",
    }
