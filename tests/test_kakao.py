import pytest
import requests

from services import user_service
from services.kakao import KakaoClient
from tests.conftest import bearer, refresh_cookie
from utils.exceptions import IllegalArgumentException


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def kakao_client():
    return KakaoClient(client_id="cid", redirect_uri="http://localhost/cb", client_secret="shh", timeout=3)


def test_exchange_code_posts_authorization_code(monkeypatch, kakao_client):
    calls = []

    def fake_post(url, data=None, headers=None, timeout=None):
        calls.append((url, data, timeout))
        return FakeResponse(200, {"access_token": "kakao-access", "token_type": "bearer"})

    monkeypatch.setattr(requests, "post", fake_post)

    assert kakao_client.exchange_code_for_token("the-code") == "kakao-access"
    url, data, timeout = calls[0]
    assert url == "https://kauth.kakao.com/oauth/token"
    assert data["grant_type"] == "authorization_code"
    assert data["code"] == "the-code"
    assert data["client_id"] == "cid"
    assert data["client_secret"] == "shh"
    assert timeout == 3


def test_rejected_code_is_an_illegal_argument(monkeypatch, kakao_client):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(400, {"error": "invalid_grant"}))
    with pytest.raises(IllegalArgumentException):
        kakao_client.exchange_code_for_token("expired-code")


def test_empty_code_is_rejected_without_a_call(monkeypatch, kakao_client):
    def boom(*a, **kw):
        raise AssertionError("no request expected")

    monkeypatch.setattr(requests, "post", boom)
    with pytest.raises(IllegalArgumentException):
        kakao_client.exchange_code_for_token("")


def test_provider_outage_propagates(monkeypatch, kakao_client):
    monkeypatch.setattr(requests, "post", lambda *a, **kw: FakeResponse(502, {}))
    with pytest.raises(requests.HTTPError):
        kakao_client.exchange_code_for_token("code")


def test_fetch_profile_reads_kakao_account(monkeypatch, kakao_client):
    seen = {}

    def fake_get(url, headers=None, timeout=None):
        seen["auth"] = headers["Authorization"]
        return FakeResponse(200, {
            "id": 123456789,
            "properties": {"nickname": "old", "profile_image": "http://img/old.png"},
            "kakao_account": {"profile": {"nickname": "zed", "profile_image_url": "http://img/zed.png"}},
        })

    monkeypatch.setattr(requests, "get", fake_get)

    profile = kakao_client.fetch_profile("kakao-access")
    assert seen["auth"] == "Bearer kakao-access"
    assert profile.kakao_id == 123456789
    assert profile.nickname == "zed"
    assert profile.picture == "http://img/zed.png"


def test_fetch_profile_falls_back_to_properties(monkeypatch, kakao_client):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(200, {
        "id": 7, "properties": {"nickname": "zed", "profile_image": "http://img/zed.png"},
    }))
    profile = kakao_client.fetch_profile("t")
    assert (profile.nickname, profile.picture) == ("zed", "http://img/zed.png")


def test_kakao_login_creates_account_once(app, client, kakao):
    kakao.add("code-1", kakao_id=99, nickname="zed", picture="http://img/zed.png")
    kakao.add("code-2", kakao_id=99, nickname="zed")

    first = client.get("/api/user/oauth2/kakao?code=code-1")
    assert first.status_code == 200
    body = first.get_json()
    assert body["nickname"] == "zed"
    assert body["picture"] == "http://img/zed.png"
    assert body["accessToken"]

    second = client.get("/api/user/oauth2/kakao?code=code-2")
    assert second.status_code == 200

    with app.app_context():
        user = user_service.find_by_kakao_id(99)
        assert user.password_hash is None
        assert user.email is None
        assert user_service.count_users() == 1
        assert user.refresh_token == refresh_cookie(client, app)


def test_kakao_login_session_can_refresh(app, client, kakao):
    kakao.add("code", kakao_id=5, nickname="zed")
    access = client.get("/api/user/oauth2/kakao?code=code").get_json()["accessToken"]

    assert client.get("/api/user/refresh", headers=bearer(access)).status_code == 200


def test_kakao_nickname_collision_gets_suffix(app, client, kakao, signup):
    signup(email="a@b.com", nickname="zed")
    kakao.add("code", kakao_id=1, nickname="zed")

    assert client.get("/api/user/oauth2/kakao?code=code").get_json()["nickname"] == "zed1"


def test_kakao_login_with_bad_code(app, client, kakao):
    resp = client.get("/api/user/oauth2/kakao?code=unknown")

    assert resp.status_code == 400
    assert not resp.headers.getlist("Set-Cookie")
    with app.app_context():
        assert user_service.count_users() == 0


def test_kakao_account_cannot_password_login(app, client, kakao, login):
    kakao.add("code", kakao_id=3, nickname="zed")
    client.get("/api/user/oauth2/kakao?code=code")
    with app.app_context():
        assert user_service.find_by_kakao_id(3).password_hash is None

    assert login(email="", password="whatever-pass").status_code == 404
