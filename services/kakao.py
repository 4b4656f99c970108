"""
Kakao OAuth2 client.

Two synchronous round trips, each with a timeout:
1. authorization code -> Kakao access token   (POST KAKAO_TOKEN_URL)
2. Kakao access token -> user profile          (GET KAKAO_PROFILE_URL)

A 4xx from Kakao means the code (or token) was rejected and surfaces as
IllegalArgumentException; transport errors and 5xx propagate.
"""
from __future__ import annotations

import logging

import requests

from services.user_service import KakaoProfile
from utils.exceptions import IllegalArgumentException

logger = logging.getLogger(__name__)


class KakaoClient:
    def __init__(self, client_id: str, redirect_uri: str, client_secret: str = "",
                 token_url: str = "https://kauth.kakao.com/oauth/token",
                 profile_url: str = "https://kapi.kakao.com/v2/user/me",
                 timeout: float = 5):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.profile_url = profile_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "KakaoClient":
        return cls(
            client_id=config["KAKAO_CLIENT_ID"],
            client_secret=config.get("KAKAO_CLIENT_SECRET", ""),
            redirect_uri=config["KAKAO_REDIRECT_URI"],
            token_url=config["KAKAO_TOKEN_URL"],
            profile_url=config["KAKAO_PROFILE_URL"],
            timeout=config.get("OAUTH_HTTP_TIMEOUT", 5),
        )

    @staticmethod
    def _raise_for_status(response: requests.Response, what: str) -> None:
        if 400 <= response.status_code < 500:
            logger.warning("Kakao rejected %s: status=%s", what, response.status_code)
            raise IllegalArgumentException(f"Kakao rejected {what}")
        response.raise_for_status()

    def exchange_code_for_token(self, code: str) -> str:
        if not code:
            raise IllegalArgumentException("Authorization code is required")
        data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "code": code,
        }
        if self.client_secret:
            data["client_secret"] = self.client_secret

        response = requests.post(
            self.token_url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded;charset=utf-8"},
            timeout=self.timeout,
        )
        self._raise_for_status(response, "authorization code")
        access_token = response.json().get("access_token")
        if not access_token:
            raise IllegalArgumentException("No access token from Kakao")
        return access_token

    def fetch_profile(self, access_token: str) -> KakaoProfile:
        response = requests.get(
            self.profile_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=self.timeout,
        )
        self._raise_for_status(response, "access token")
        body = response.json()

        kakao_id = body.get("id")
        if kakao_id is None:
            raise IllegalArgumentException("Kakao profile has no id")
        profile = (body.get("kakao_account") or {}).get("profile") or {}
        properties = body.get("properties") or {}
        return KakaoProfile(
            kakao_id=int(kakao_id),
            nickname=profile.get("nickname") or properties.get("nickname") or "",
            picture=profile.get("profile_image_url") or properties.get("profile_image"),
        )
