"""
Tests for the user service routes: register, login, profile, refresh.
"""

from jose import jwt

from notes_app.config import get_settings
from notes_app.core.security import create_access_token, decode_access_token, hash_password, verify_password


def _register(client, username="bob", password="secret123"):
    return client.post("/api/users/register", json={"username": username, "password": password})


class TestRegister:
    def test_register_creates_user(self, client, fake_db):
        response = _register(client)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        stored = fake_db.tables["users"][0]
        assert stored["username"] == "bob"
        assert stored["password_hash"] != "secret123"

    def test_username_is_trimmed(self, client, fake_db):
        _register(client, username="  carol  ")
        assert fake_db.tables["users"][0]["username"] == "carol"

    def test_duplicate_username_rejected(self, client):
        _register(client)
        response = _register(client)
        assert response.status_code == 400
        assert response.json()["detail"]["type"] == "UsernameTakenError"

    def test_short_username_rejected(self, client):
        assert _register(client, username="ab").status_code == 422

    def test_short_password_rejected(self, client):
        assert _register(client, password="12345").status_code == 422


class TestLogin:
    def test_login_returns_token_for_user(self, client):
        user_id = _register(client).json()["id"]
        response = client.post("/api/users/login", json={"username": "bob", "password": "secret123"})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "bob"
        assert decode_access_token(body["access_token"])["sub"] == str(user_id)

    def test_wrong_password(self, client):
        _register(client)
        response = client.post("/api/users/login", json={"username": "bob", "password": "wrong-pass"})
        assert response.status_code == 401

    def test_unknown_user_same_error(self, client):
        response = client.post("/api/users/login", json={"username": "nobody", "password": "whatever"})
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "Invalid username or password"


class TestProfile:
    def test_profile_requires_token(self, client):
        assert client.get("/api/users/profile").status_code == 401

    def test_profile_with_token(self, client, user, auth_headers):
        response = client.get("/api/users/profile", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_token_for_deleted_user(self, client):
        headers = {"Authorization": f"Bearer {create_access_token(999)}"}
        assert client.get("/api/users/profile", headers=headers).status_code == 401

    def test_refresh_issues_new_token(self, client, user, auth_headers):
        response = client.post("/api/users/refresh", headers=auth_headers)
        assert response.status_code == 200
        assert decode_access_token(response.json()["access_token"])["sub"] == str(user["id"])

    def test_garbage_token(self, client):
        headers = {"Authorization": "Bearer not-a-jwt"}
        assert client.get("/api/users/profile", headers=headers).status_code == 401


class TestSecurity:
    def test_password_round_trip(self):
        stored = hash_password("secret123")
        assert verify_password("secret123", stored)
        assert not verify_password("secret124", stored)

    def test_non_bcrypt_hash_never_matches(self):
        assert not verify_password("x", "x")
        assert not verify_password("x", "")

    def test_token_without_subject_rejected(self):
        settings = get_settings()
        token = jwt.encode({"scope": "notes"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        assert decode_access_token(token) is None

    def test_extra_claims_cannot_override_subject(self):
        token = create_access_token(7, {"sub": "8", "role": "user"})
        claims = decode_access_token(token)
        assert claims["sub"] == "7"
        assert claims["role"] == "user"
