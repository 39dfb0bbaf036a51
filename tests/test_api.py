import pytest

from auth import authentication
from schemas.userschema import UserSchema, UserCredsSchema


@pytest.fixture
def user_schema():
    user = UserSchema(
        first_name="Test",
        last_name="User",
        email="levelediters@gmail.com",
        password="testpassword",
    )
    yield user.model_dump(by_alias=True)


@pytest.fixture
def user_creds_schema():
    user_creds = UserCredsSchema(
        email="levelediters@gmail.com", password="testpassword"
    )
    yield user_creds.model_dump(by_alias=True)


def test_health(tester) -> None:
    response = tester.get(url="/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_signup(tester, user_schema) -> None:
    response = tester.post(url="/auth/signup", json=user_schema)

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "levelediters@gmail.com"
    assert body["user"]["firstName"] == "Test"
    assert "password" not in body["user"]


def test_signup_duplicate_email_conflicts(tester, user_schema) -> None:
    tester.post(url="/auth/signup", json=user_schema)

    response = tester.post(
        url="/auth/signup", json={**user_schema, "email": "LevelEditers@Gmail.com"}
    )

    assert response.status_code == 409
    assert response.json() == "User with this email already exists"


def test_signup_rejects_bad_input(tester, user_schema) -> None:
    assert tester.post(url="/auth/signup", json={**user_schema, "email": "nope"}).status_code == 422
    assert tester.post(url="/auth/signup", json={**user_schema, "password": "12345"}).status_code == 422


def test_login(tester, user_schema, user_creds_schema) -> None:
    tester.post(url="/auth/signup", json=user_schema)

    response = tester.post(url="/auth/login", json=user_creds_schema)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email"] == "levelediters@gmail.com"
    assert authentication.verify_token(body["token"]).id == body["user"]["id"]


def test_login_wrong_password(tester, user_schema, user_creds_schema) -> None:
    tester.post(url="/auth/signup", json=user_schema)

    wrong = tester.post(url="/auth/login", json={**user_creds_schema, "password": "wrongpassword"})
    unknown = tester.post(url="/auth/login", json={**user_creds_schema, "email": "who@example.com"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json() == "Invalid email or password"


def test_verify(tester, register_user) -> None:
    account = register_user()

    response = tester.post(url="/auth/verify", headers=account["headers"])

    assert response.status_code == 200
    assert response.json()["user"]["id"] == account["user"]["id"]


def test_verify_rejects_missing_or_malformed_token(tester) -> None:
    missing = tester.post(url="/auth/verify")
    malformed = tester.post(url="/auth/verify", headers={"Authorization": "Token abc"})
    invalid = tester.post(url="/auth/verify", headers={"Authorization": "Bearer abc"})

    assert missing.status_code == 401
    assert missing.json() == "Authorization header is required"
    assert malformed.status_code == 401
    assert invalid.status_code == 401
    assert invalid.json() == "Invalid token"


def test_issued_token_carries_email(register_user) -> None:
    account = register_user(email="mail@example.com")

    token_user = authentication.verify_token(account["token"])

    assert token_user.email == "mail@example.com"


def test_get_own_user(tester, register_user) -> None:
    account = register_user()
    user_id = account["user"]["id"]

    by_id = tester.get(url=f"/user/{user_id}", headers=account["headers"])
    by_email = tester.get(url="/user/email/jane@example.com", headers=account["headers"])

    assert by_id.status_code == 200
    assert by_id.json()["email"] == "jane@example.com"
    assert by_email.json()["id"] == user_id


def test_users_cannot_read_each_other(tester, register_user) -> None:
    jane = register_user()
    john = register_user(email="john@example.com")

    response = tester.get(url=f"/user/{john['user']['id']}", headers=jane["headers"])

    assert response.status_code == 403


def test_email_lookup_does_not_reveal_registered_emails(tester, register_user) -> None:
    jane = register_user()
    register_user(email="john@example.com")

    taken = tester.get(url="/user/email/john@example.com", headers=jane["headers"])
    unknown = tester.get(url="/user/email/nobody@example.com", headers=jane["headers"])
    own_mixed_case = tester.get(url="/user/email/Jane@Example.com", headers=jane["headers"])

    assert taken.status_code == unknown.status_code == 403
    assert taken.json() == unknown.json() == "Access denied"
    assert own_mixed_case.status_code == 200


def test_user_endpoints_require_token(tester, register_user) -> None:
    account = register_user()

    response = tester.get(url=f"/user/{account['user']['id']}")

    assert response.status_code == 401


def test_update_profile(tester, register_user) -> None:
    account = register_user()
    user_id = account["user"]["id"]

    response = tester.post(
        url=f"/user/{user_id}", json={"firstName": "Janet"}, headers=account["headers"]
    )

    assert response.status_code == 200
    assert response.json()["firstName"] == "Janet"
    assert response.json()["lastName"] == "Doe"


def test_update_password(tester, register_user) -> None:
    account = register_user()
    url = f"/user/{account['user']['id']}/password"

    wrong = tester.post(
        url=url,
        json={"currentPassword": "incorrect", "newPassword": "newpassword"},
        headers=account["headers"],
    )
    right = tester.post(
        url=url,
        json={"currentPassword": "password123", "newPassword": "newpassword"},
        headers=account["headers"],
    )

    assert wrong.status_code == 401
    assert right.status_code == 200
    assert right.json() == {"message": "Password updated successfully"}

    login = tester.post(
        url="/auth/login", json={"email": "jane@example.com", "password": "newpassword"}
    )
    assert login.status_code == 200
