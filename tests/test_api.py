"""API endpoint tests for health, signup, login and user listing."""

from unittest.mock import patch

from jose import jwt

from places_api.config import get_settings
from places_api.exceptions import SigningFailure, StoreUnavailable
from places_api.services import auth as auth_service
from places_api.services.store import RecordStore
from places_api.services.user_service import UserService

ANN = {"name": "Ann", "email": "ann@x.com", "password": "secret1", "image": "ann.png"}


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unknown_route(client):
    """Unknown routes use the uniform error body."""
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Could not find this route.", "code": "ROUTE_NOT_FOUND"}


def test_signup(client):
    """Test user signup returns id, email and a token."""
    response = client.post(
        "/api/users/signup",
        json={"name": "Ann", "email": "ann@x.com", "password": "secret1", "image": "ann.png"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "ann@x.com"
    assert isinstance(data["userId"], int)
    assert data["token"]


def test_signup_normalizes_email(client):
    response = client.post(
        "/api/users/signup",
        json={"name": "Ann", "email": "Ann@X.com", "password": "secret1", "image": "ann.png"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "ann@x.com"


def test_signup_duplicate_email(client, auth_headers):
    """Test signup with duplicate email fails."""
    response = client.post(
        "/api/users/signup",
        json={
            "name": "Duplicate",
            "email": auth_headers.email,
            "password": "password123",
            "image": "dup.png",
        },
    )
    assert response.status_code == 422
    assert response.json()["code"] == "USER_EXISTS"


def test_signup_invalid_inputs(client):
    """Short passwords, bad emails and empty names are rejected."""
    bad_payloads = [
        {"name": "Ann", "email": "ann@x.com", "password": "short", "image": "a.png"},
        {"name": "Ann", "email": "not-an-email", "password": "secret1", "image": "a.png"},
        {"name": "", "email": "ann@x.com", "password": "secret1", "image": "a.png"},
        {"name": "Ann", "email": "ann@x.com", "password": "secret1"},
    ]
    for payload in bad_payloads:
        response = client.post("/api/users/signup", json=payload)
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_signup_hashes_password(client, db):
    from places_api.models.user import User

    client.post(
        "/api/users/signup",
        json={"name": "Ann", "email": "ann@x.com", "password": "secret1", "image": "ann.png"},
    )
    user = db.query(User).filter(User.email == "ann@x.com").first()
    assert user.password_hash != "secret1"
    assert user.password_hash.startswith("$2")


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/users/login", json={"email": auth_headers.email, "password": "secret1"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["userId"] == auth_headers.user_id
    assert data["email"] == auth_headers.email


def test_login_token_matches_user(client):
    """Ann signs up, logs in, and both tokens carry the same user id."""
    signup = client.post(
        "/api/users/signup",
        json={"name": "Ann", "email": "ann@x.com", "password": "secret1", "image": "ann.png"},
    )
    assert signup.status_code == 201
    first_token = signup.json()["token"]

    login = client.post("/api/users/login", json={"email": "ann@x.com", "password": "secret1"})
    assert login.status_code == 200
    second_token = login.json()["token"]

    settings = get_settings()
    first = jwt.decode(first_token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    second = jwt.decode(second_token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert first["sub"] == second["sub"] == str(signup.json()["userId"])
    assert second["email"] == "ann@x.com"

    wrong = client.post("/api/users/login", json={"email": "ann@x.com", "password": "wrongpass"})
    assert wrong.status_code == 403
    assert wrong.json()["code"] == "INVALID_CREDENTIALS"


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/users/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 403
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_login_unknown_email(client, auth_headers):
    """Unknown email answers 401 with the same message as a wrong password."""
    unknown = client.post(
        "/api/users/login", json={"email": "nobody@example.com", "password": "secret1"}
    )
    wrong = client.post(
        "/api/users/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert unknown.status_code == 401
    assert unknown.json() == wrong.json()


def test_get_users(client, auth_headers, other_auth_headers):
    """Users are listed without their password hashes."""
    response = client.get("/api/users")
    assert response.status_code == 200
    users = response.json()["users"]
    assert {u["email"] for u in users} == {auth_headers.email, other_auth_headers.email}
    for user in users:
        assert "password" not in user
        assert "password_hash" not in user
        assert user["places"] == []


def test_get_users_empty(client):
    response = client.get("/api/users")
    assert response.status_code == 200
    assert response.json() == {"users": []}


def test_signup_race_on_same_email(client, auth_headers, db):
    """A signup that passes the lookup but loses the insert race is a USER_EXISTS."""
    from places_api.models.user import User

    with patch.object(UserService, "get_user_by_email", return_value=None):
        response = client.post(
            "/api/users/signup", json={**ANN, "email": auth_headers.email}
        )

    assert response.status_code == 422
    assert response.json()["code"] == "USER_EXISTS"
    assert db.query(User).count() == 1


def test_signup_lookup_failure(client):
    with patch.object(RecordStore, "find_one", side_effect=StoreUnavailable()):
        response = client.post("/api/users/signup", json=ANN)
    assert response.status_code == 500
    assert response.json()["code"] == "LOOKUP_FAILED"


def test_signup_hash_failure(client, db):
    from places_api.models.user import User

    with patch.object(auth_service.pwd_context, "hash", side_effect=ValueError("boom")):
        response = client.post("/api/users/signup", json=ANN)
    assert response.status_code == 500
    assert response.json() == {
        "message": "Could not create user, please try again.",
        "code": "SIGNUP_FAILED",
    }
    assert db.query(User).count() == 0


def test_signup_store_failure(client):
    with patch.object(RecordStore, "save", side_effect=StoreUnavailable()):
        response = client.post("/api/users/signup", json=ANN)
    assert response.status_code == 500
    assert response.json()["code"] == "SIGNUP_FAILED"


def test_signup_signing_failure(client):
    with patch(
        "places_api.services.user_service.create_access_token", side_effect=SigningFailure()
    ):
        response = client.post("/api/users/signup", json=ANN)
    assert response.status_code == 500
    assert response.json()["code"] == "SIGNUP_FAILED"


def test_login_lookup_failure(client, auth_headers):
    with patch.object(RecordStore, "find_one", side_effect=StoreUnavailable()):
        response = client.post(
            "/api/users/login", json={"email": auth_headers.email, "password": "secret1"}
        )
    assert response.status_code == 500
    assert response.json()["code"] == "LOOKUP_FAILED"


def test_login_verify_failure(client, auth_headers):
    with patch.object(auth_service.pwd_context, "verify", side_effect=ValueError("bad hash")):
        response = client.post(
            "/api/users/login", json={"email": auth_headers.email, "password": "secret1"}
        )
    assert response.status_code == 500
    assert response.json() == {
        "message": "Could not log you in, please try again.",
        "code": "LOGIN_FAILED",
    }


def test_login_signing_failure(client, auth_headers):
    with patch(
        "places_api.services.user_service.create_access_token", side_effect=SigningFailure()
    ):
        response = client.post(
            "/api/users/login", json={"email": auth_headers.email, "password": "secret1"}
        )
    assert response.status_code == 500
    assert response.json()["code"] == "LOGIN_FAILED"


def test_get_users_store_failure(client):
    with patch.object(RecordStore, "find_many", side_effect=StoreUnavailable()):
        response = client.get("/api/users")
    assert response.status_code == 500
    assert response.json()["code"] == "LOOKUP_FAILED"
