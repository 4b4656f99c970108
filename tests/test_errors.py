import pytest

from api.errors import status_for
from services import user_service
from utils.decorators import authenticate_request
from utils.exceptions import (
    AppError,
    DuplicateException,
    IllegalArgumentException,
    MalformedTokenError,
    NotFoundException,
    UnAuthorizedException,
)
from tests.conftest import bearer


@pytest.mark.parametrize(
    "err, status",
    [
        (NotFoundException(), 404),
        (DuplicateException(), 409),
        (UnAuthorizedException(), 401),
        (IllegalArgumentException(), 400),
        (MalformedTokenError(), 400),
        (AppError(), 500),
    ],
)
def test_status_for(err, status):
    assert status_for(err) == status


def test_error_envelope(client):
    resp = client.get("/api/user/profile")
    assert resp.get_json() == {
        "error": "UNAUTHORIZED",
        "message": "Missing or invalid access token",
        "status": 401,
    }


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/user/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "NOT_FOUND"


def test_gate_resolves_valid_token(app, client, signup, login):
    signup()
    access = login().get_json()["accessToken"]

    with app.test_request_context(headers=bearer(access)):
        identity = authenticate_request()
        assert identity.user.nickname == "zed"
        assert not identity.expired


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Token abc"}, bearer("garbage")])
def test_gate_lets_anonymous_requests_through(app, headers):
    with app.test_request_context(headers=headers):
        assert authenticate_request() is None


def test_gate_drops_token_of_unknown_account(app):
    provider = app.extensions["token_provider"]
    token = provider.create_auth_token(12345, "ghost", "USER", provider.now() + app.config["ACCESS_TOKEN_EXPIRES"])

    with app.test_request_context(headers=bearer(token.token)):
        assert authenticate_request() is None


def test_gate_rejects_refresh_token_as_bearer(app, client, signup, login):
    signup()
    login()
    with app.app_context():
        refresh = user_service.find_by_email("x@y.com").refresh_token

    with app.test_request_context(headers=bearer(refresh)):
        assert authenticate_request(allow_expired=True) is None


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["database"] == "ok"
