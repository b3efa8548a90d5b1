from fastapi import status
from fastapi.testclient import TestClient

from api.main import create_app
from api.middleware.error_handler import status_code_for
from exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidTokenError,
    MembazaError,
    UserAlreadyExistsError,
    UserDisabledError,
)


def test_status_codes_follow_class_hierarchy():
    class CustomTokenError(InvalidTokenError):
        pass

    assert status_code_for(CustomTokenError()) == status.HTTP_401_UNAUTHORIZED
    assert status_code_for(UserDisabledError("u1")) == status.HTTP_403_FORBIDDEN
    assert status_code_for(UserAlreadyExistsError("email", "a@x.com")) == status.HTTP_409_CONFLICT
    assert status_code_for(ConfigurationError("x", "y")) == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert status_code_for(AuthenticationError("unmapped")) == status.HTTP_500_INTERNAL_SERVER_ERROR


def test_error_body_shape():
    assert MembazaError("boom", {"k": "v"}).to_dict() == {
        "error_type": "MembazaError",
        "message": "boom",
        "details": {"k": "v"},
    }


def _app_with_failing_route(settings):
    app = create_app(settings=settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret internals")

    return app


def test_unexpected_errors_hide_details(settings):
    with TestClient(_app_with_failing_route(settings)) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["error_type"] == "InternalServerError"
    assert response.json()["details"] == {}


def test_unexpected_errors_show_details_in_debug(settings):
    debug_settings = settings.model_copy(update={"api_debug": True})

    with TestClient(_app_with_failing_route(debug_settings)) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["details"] == {"error": "secret internals"}
