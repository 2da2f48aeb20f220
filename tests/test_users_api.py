# tests/test_users_api.py

from __future__ import annotations

from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.models.user import User
from app.utils.security import decode_access_token

from .fakes import CommitFailure


def _login(client: TestClient, email: str = "alice@example.com", password: str = "secret123"):
    return client.post("/api/users/login", json={"email": email, "password": password})


def test_register_returns_user_and_token(client: TestClient, register) -> None:
    body = register(firstName="Alice", lastName="Johnson")

    assert body["message"] == "User registered successfully"
    user = body["user"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@example.com"
    assert user["fullName"] == "Alice Johnson"
    assert user["isActive"] is True
    assert user["role"] == "user"
    assert "password" not in user
    assert "hashedPassword" not in user

    claims = decode_access_token(body["token"])
    assert claims["id"] == user["id"]
    assert claims["email"] == "alice@example.com"
    assert claims["role"] == "user"


def test_register_stores_only_a_hash(client: TestClient, register, db_session: Session) -> None:
    register(password="secret123")
    stored = db_session.query(User).filter(User.username == "alice").one()

    assert stored.hashed_password != "secret123"
    assert stored.check_password("secret123")


def test_register_rejects_duplicate_email(client: TestClient, register) -> None:
    register()
    response = client.post(
        "/api/users/register",
        json={"username": "alice2", "email": "ALICE@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User with this email or username already exists"


def test_register_rejects_duplicate_username(client: TestClient, register) -> None:
    register()
    response = client.post(
        "/api/users/register",
        json={"username": "alice", "email": "other@example.com", "password": "secret123"},
    )
    assert response.status_code == 400


def test_register_field_validation(client: TestClient) -> None:
    response = client.post(
        "/api/users/register",
        json={"username": "al", "email": "nope", "password": "123"},
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"username", "email", "password"}


def test_register_rejects_overlong_username(client: TestClient) -> None:
    response = client.post(
        "/api/users/register",
        json={"username": "u" * 31, "email": "long@example.com", "password": "secret123"},
    )
    assert response.status_code == 400


def test_login_success_records_last_login(client: TestClient, register) -> None:
    registered = register()
    assert registered["user"]["lastLogin"] is None

    response = _login(client, email="Alice@Example.com")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["lastLogin"] is not None
    assert decode_access_token(body["token"])["id"] == registered["user"]["id"]


def test_login_failures_do_not_reveal_which_field_was_wrong(client: TestClient, register) -> None:
    register()
    wrong_password = _login(client, password="wrong-password")
    unknown_email = _login(client, email="nobody@example.com")

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password"}


def test_login_rejects_inactive_account(client: TestClient, register, db_session: Session) -> None:
    register()
    user = db_session.query(User).filter(User.username == "alice").one()
    user.is_active = False
    db_session.commit()

    response = _login(client)
    assert response.status_code == 403
    assert response.json()["detail"] == "Account is deactivated"


def test_get_profile(client: TestClient, register) -> None:
    user_id = register()["user"]["id"]

    response = client.get(f"/api/users/profile/{user_id}")
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    assert client.get("/api/users/profile/999").status_code == 404


def test_update_profile(client: TestClient, register) -> None:
    user_id = register()["user"]["id"]

    response = client.put(
        f"/api/users/profile/{user_id}",
        json={"firstName": "Alice", "lastName": "Liddell", "email": "alice@example.com"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    assert body["user"]["fullName"] == "Alice Liddell"


def test_update_profile_rejects_taken_email_or_username(client: TestClient, register) -> None:
    alice_id = register()["user"]["id"]
    register(username="bob", email="bob@example.com")

    taken_email = client.put(f"/api/users/profile/{alice_id}", json={"email": "bob@example.com"})
    taken_username = client.put(f"/api/users/profile/{alice_id}", json={"username": "bob"})

    assert taken_email.status_code == 400
    assert taken_username.status_code == 400
    assert taken_email.json()["detail"] == "Email or username already in use"


def test_update_profile_unknown_user(client: TestClient) -> None:
    assert client.put("/api/users/profile/999", json={"firstName": "X"}).status_code == 404


def test_update_profile_password_is_rehashed(client: TestClient, register) -> None:
    user_id = register()["user"]["id"]

    response = client.put(f"/api/users/profile/{user_id}", json={"password": "new-secret"})
    assert response.status_code == 200

    assert _login(client, password="secret123").status_code == 401
    assert _login(client, password="new-secret").status_code == 200


def test_list_users_paginates_newest_first(client: TestClient, register) -> None:
    for i in range(3):
        register(username=f"user{i}", email=f"user{i}@example.com")

    body = client.get("/api/users", params={"page": 1, "limit": 2}).json()
    assert [user["username"] for user in body["users"]] == ["user2", "user1"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert all("hashedPassword" not in user for user in body["users"])


def test_me_requires_a_valid_token(client: TestClient, register) -> None:
    token = register()["token"]

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    assert client.get("/api/users/me").status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": "Bearer junk"}).status_code == 401
    assert client.get("/api/users/me", headers={"Authorization": f"Basic {token}"}).status_code == 401


def test_docs_advertise_a_plain_bearer_scheme(client: TestClient) -> None:
    schemes = client.get("/openapi.json").json()["components"]["securitySchemes"]
    assert list(schemes.values()) == [{"type": "http", "scheme": "bearer"}]


def _unique_violation() -> IntegrityError:
    return IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email"))


def _db_down() -> OperationalError:
    return OperationalError("COMMIT", {}, Exception("database is locked"))


def test_register_lost_race_is_reported_as_duplicate(
    client: TestClient, commit_failure: CommitFailure
) -> None:
    commit_failure.arm(_unique_violation())

    response = client.post(
        "/api/users/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "User with this email or username already exists"
    assert commit_failure.rollbacks == 1
    assert _login(client).status_code == 401


def test_register_store_failure_returns_500(client: TestClient, commit_failure: CommitFailure) -> None:
    commit_failure.arm(_db_down())

    response = client.post(
        "/api/users/register",
        json={"username": "alice", "email": "alice@example.com", "password": "secret123"},
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to register user"}
    assert commit_failure.rollbacks == 1


def test_login_store_failure_returns_500(client: TestClient, register, commit_failure: CommitFailure) -> None:
    register()
    commit_failure.arm(_db_down())

    response = _login(client)

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to login"}
    assert commit_failure.rollbacks == 1


def test_update_profile_lost_race_is_reported_as_in_use(
    client: TestClient, register, commit_failure: CommitFailure
) -> None:
    user_id = register()["user"]["id"]
    commit_failure.arm(_unique_violation())

    response = client.put(f"/api/users/profile/{user_id}", json={"email": "taken@example.com"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email or username already in use"
    assert commit_failure.rollbacks == 1
    assert client.get(f"/api/users/profile/{user_id}").json()["email"] == "alice@example.com"


def test_update_profile_store_failure_returns_500(
    client: TestClient, register, commit_failure: CommitFailure
) -> None:
    user_id = register()["user"]["id"]
    commit_failure.arm(_db_down())

    response = client.put(f"/api/users/profile/{user_id}", json={"firstName": "Al"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to update profile"}
    assert client.get(f"/api/users/profile/{user_id}").json()["firstName"] is None


def test_user_timestamps_carry_utc_offset(client: TestClient, register) -> None:
    register()
    user = _login(client).json()["user"]

    for field in ("lastLogin", "createdAt", "updatedAt"):
        assert datetime.fromisoformat(user[field].replace("Z", "+00:00")).utcoffset() == timedelta(0)
