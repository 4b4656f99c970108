"""
Authentication flows: password login, Kakao login, access-token refresh and
logout.

Every login issues a complete AuthTokenPair and overwrites the single
refresh-token slot on the account, so a second login ends the first session.
The clock is read once per flow so both halves of a pair share one instant.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app

from models.user import User
from services import user_service
from services.kakao import KakaoClient
from utils.exceptions import MalformedTokenError, NotFoundException, UnAuthorizedException
from utils.security import AuthToken, AuthTokenProvider, REFRESH, verify_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthTokenPair:
    access_token: AuthToken
    refresh_token: AuthToken


@dataclass(frozen=True)
class LoginResult:
    user: User
    tokens: AuthTokenPair


def issue_access_token(provider: AuthTokenProvider, user: User, now: datetime) -> AuthToken:
    cfg = current_app.config
    return provider.create_auth_token(
        user.id, user.nickname, cfg["DEFAULT_ROLE"], now + cfg["ACCESS_TOKEN_EXPIRES"]
    )


def issue_token_pair(provider: AuthTokenProvider, user: User) -> AuthTokenPair:
    """Mint both tokens and record the refresh half on the account."""
    cfg = current_app.config
    now = provider.now()
    access = issue_access_token(provider, user, now)
    refresh = provider.create_refresh_token(
        cfg["REFRESH_TOKEN_SUBJECT"], now + cfg["REFRESH_TOKEN_EXPIRES"]
    )
    user_service.save_refresh_token(user.id, refresh.token)
    logger.debug("Issued token pair for user id=%s", user.id)
    return AuthTokenPair(access_token=access, refresh_token=refresh)


def login_user(email: str, password: str, provider: AuthTokenProvider) -> LoginResult:
    # Missing account and wrong password are reported the same way
    user = user_service.find_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Password login rejected")
        raise NotFoundException("Invalid email or password")

    logger.info("Password login user id=%s", user.id)
    return LoginResult(user=user, tokens=issue_token_pair(provider, user))


def kakao_login(code: str, kakao: KakaoClient, provider: AuthTokenProvider) -> LoginResult:
    kakao_access_token = kakao.exchange_code_for_token(code)
    profile = kakao.fetch_profile(kakao_access_token)

    user = user_service.find_by_kakao_id(profile.kakao_id)
    if user is None:
        user = user_service.create_user_from_kakao(profile)

    logger.info("Kakao login user id=%s", user.id)
    return LoginResult(user=user, tokens=issue_token_pair(provider, user))


def refresh_access_token(user: User, raw_refresh_token: Optional[str],
                         provider: AuthTokenProvider) -> AuthToken:
    """
    New access token for `user` if the cookie refresh token is well signed,
    unexpired and the account still has an active session. The refresh token
    itself is not rotated.
    """
    if not raw_refresh_token:
        logger.info("Refresh rejected for user id=%s: no refresh cookie", user.id)
        raise UnAuthorizedException("Refresh token is missing")

    try:
        refresh = provider.convert_auth_token(raw_refresh_token, expected_type=REFRESH)
    except MalformedTokenError:
        logger.info("Refresh rejected for user id=%s: malformed token", user.id)
        raise UnAuthorizedException("Invalid refresh token")

    now = provider.now()
    stored = user.refresh_token
    if not refresh.is_valid(now) or not stored:
        logger.info("Refresh rejected for user id=%s: expired or no session", user.id)
        raise UnAuthorizedException("Invalid refresh token")

    if current_app.config["REFRESH_TOKEN_STRICT_MATCH"] and not hmac.compare_digest(
        stored.encode(), raw_refresh_token.encode()
    ):
        logger.info("Refresh rejected for user id=%s: token is not the current session", user.id)
        raise UnAuthorizedException("Invalid refresh token")

    logger.debug("Re-issued access token for user id=%s", user.id)
    return issue_access_token(provider, user, now)


def logout_user(user: User) -> None:
    user_service.delete_refresh_token(user.id)
    logger.info("Logout user id=%s", user.id)
