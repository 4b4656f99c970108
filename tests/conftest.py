"""Shared fixtures: a fresh in-memory app per test, a fake Kakao client and a frozen clock."""
from datetime import datetime, timezone

import pytest

from api import create_app
from models import storage
from services.user_service import KakaoProfile
from utils.exceptions import IllegalArgumentException

PASSWORD = "correct-horse"


class FakeKakaoClient:
    """Maps authorization codes to profiles; unknown codes are rejected like Kakao does."""

    def __init__(self):
        self.profiles = {}
        self.exchanged = []

    def add(self, code, kakao_id, nickname, picture=None):
        self.profiles[code] = KakaoProfile(kakao_id=kakao_id, nickname=nickname, picture=picture)

    def exchange_code_for_token(self, code):
        self.exchanged.append(code)
        if code not in self.profiles:
            raise IllegalArgumentException("Kakao rejected authorization code")
        return f"kakao-token:{code}"

    def fetch_profile(self, access_token):
        return self.profiles[access_token.split(":", 1)[1]]


class FrozenClock:
    def __init__(self, now):
        self.current = now

    def __call__(self):
        return self.current

    def advance(self, delta):
        self.current = self.current + delta


@pytest.fixture
def clock():
    return FrozenClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
def kakao():
    return FakeKakaoClient()


@pytest.fixture
def app(clock, kakao):
    app = create_app("testing")
    app.extensions["token_provider"].clock = clock
    app.extensions["kakao_client"] = kakao
    yield app
    with app.app_context():
        storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup(client):
    def _signup(email="x@y.com", nickname="zed", password=PASSWORD, **extra):
        body = {"email": email, "nickname": nickname, "password": password, **extra}
        return client.post("/api/user/signup", json=body)

    return _signup


@pytest.fixture
def login(client):
    def _login(email="x@y.com", password=PASSWORD):
        return client.post("/api/user/login", json={"email": email, "password": password})

    return _login


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def refresh_cookie(client, app):
    cookie = client.get_cookie(app.config["REFRESH_TOKEN_COOKIE"], path=app.config["REFRESH_COOKIE_PATH"])
    return cookie.value if cookie else None
