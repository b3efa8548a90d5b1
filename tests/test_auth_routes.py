from datetime import timedelta

import pytest

from models import JwtToken


def _login(client, email="a@x.com", password="pw"):
    return client.post("/users/login", json={"email": email, "password": password})


def test_login_returns_token_with_user_subject(client, make_user, jwt_service):
    make_user()

    response = _login(client)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"token"}
    assert jwt_service.validate(JwtToken(**body)).subject == "u1"


def test_wrong_password_and_unknown_email_give_same_response(client, make_user):
    make_user()

    wrong_password = _login(client, password="wrong")
    unknown_email = _login(client, email="nobody@x.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json() == {
        "error_type": "InvalidCredentialsError",
        "message": "Invalid username or password.",
        "details": {},
    }
    assert wrong_password.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize(
    "confirmed, enabled, status_code, error_type",
    [
        (False, True, 403, "UserNotConfirmedError"),
        (False, False, 403, "UserNotConfirmedError"),
        (True, False, 403, "UserDisabledError"),
    ],
)
def test_login_status_gate(client, make_user, confirmed, enabled, status_code, error_type):
    make_user(confirmed=confirmed, enabled=enabled)

    response = _login(client)

    assert response.status_code == status_code
    assert response.json()["error_type"] == error_type


def test_login_requires_both_fields(client):
    response = client.post("/users/login", json={"email": "a@x.com"})

    assert response.status_code == 422


def test_refresh_returns_new_token(client, make_user):
    make_user()
    token = _login(client).json()

    response = client.post("/users/refresh", json=token)

    assert response.status_code == 200
    assert response.json()["token"] != token["token"]


def test_refresh_with_expired_token(client, make_user, jwt_service):
    make_user()
    expired = jwt_service.issue("u1", expires_delta=timedelta(seconds=-10))

    response = client.post("/users/refresh", json=expired.model_dump())

    assert response.status_code == 401
    assert response.json()["error_type"] == "InvalidTokenError"


def test_refresh_with_garbage_token(client):
    response = client.post("/users/refresh", json={"token": "garbage"})

    assert response.status_code == 401
    assert response.json()["error_type"] == "InvalidTokenError"


def test_refresh_for_deleted_user(client, make_user, user_store):
    make_user()
    token = _login(client).json()
    user_store.delete("u1")

    response = client.post("/users/refresh", json=token)

    assert response.status_code == 404
    assert response.json()["error_type"] == "UserNotFoundError"
    assert response.json()["details"] == {"user_id": "u1"}


def test_refresh_after_account_disabled(client, make_user, user_store):
    user = make_user()
    token = _login(client).json()
    user_store.delete(user.id)
    make_user(enabled=False)

    response = client.post("/users/refresh", json=token)

    assert response.status_code == 403
    assert response.json()["error_type"] == "UserDisabledError"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {"token": "garbage"}},
        {"json": {}},
        {"content": b"not json at all"},
        {},
    ],
)
def test_logout_always_succeeds_with_empty_body(client, kwargs):
    response = client.post("/users/logout", **kwargs)

    assert response.status_code == 200
    assert response.content == b""


def test_logout_does_not_revoke_token(client, make_user):
    make_user()
    token = _login(client).json()

    client.post("/users/logout", json=token)
    response = client.post("/users/refresh", json=token)

    assert response.status_code == 200


def test_base_path_is_configurable(settings, user_store, make_user):
    from fastapi.testclient import TestClient

    from api.main import create_app

    make_user()
    app = create_app(settings=settings.model_copy(update={"api_base_path": "/api/v1/users"}), user_store=user_store)

    with TestClient(app) as client:
        assert client.post("/api/v1/users/login", json={"email": "a@x.com", "password": "pw"}).status_code == 200
        assert client.post("/users/login", json={"email": "a@x.com", "password": "pw"}).status_code == 404


def test_empty_password_is_rejected_like_any_wrong_password(client, make_user):
    make_user()

    empty = _login(client, password="")
    wrong = _login(client, password="wrong")

    assert empty.status_code == wrong.status_code == 401
    assert empty.json() == wrong.json()


def test_error_responses_carry_cors_headers(client, make_user):
    make_user()

    response = client.post(
        "/users/login",
        json={"email": "a@x.com", "password": "wrong"},
        headers={"Origin": "http://app.example"},
    )

    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == "*"


def test_logout_succeeds_after_shutdown(settings, user_store):
    from fastapi.testclient import TestClient

    from api.main import create_app

    app = create_app(settings=settings, user_store=user_store)
    with TestClient(app):
        pass
    assert app.state.authenticator is None

    response = TestClient(app).post("/users/logout", json={"token": "garbage"})

    assert response.status_code == 200
    assert response.content == b""
