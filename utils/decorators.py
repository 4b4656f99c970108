"""
Request authentication gate.

`authenticate_request` never fails: a missing, malformed, expired or orphaned
access token simply yields no identity, because public routes share the same
gate. `login_required` is where a missing identity becomes a 401, and it hands
the resolved user to the view as the `current_user` keyword argument.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import current_app, request

from models.user import User
from services import user_service
from utils.exceptions import MalformedTokenError, UnAuthorizedException
from utils.security import ACCESS, AuthToken, AuthTokenProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user: User
    token: AuthToken
    expired: bool


def get_token_provider() -> AuthTokenProvider:
    return current_app.extensions["token_provider"]


def bearer_token() -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def authenticate_request(allow_expired: bool = False) -> Optional[Identity]:
    """
    Resolve the bearer access token to an account, or None.
    With allow_expired the token's signature must still verify but its expiry
    is ignored (used by the refresh endpoint).
    """
    raw = bearer_token()
    if raw is None:
        return None

    provider = get_token_provider()
    try:
        token = provider.convert_auth_token(raw, expected_type=ACCESS)
    except MalformedTokenError:
        logger.debug("Ignoring malformed access token")
        return None

    expired = not token.is_valid(provider.now())
    if expired and not allow_expired:
        return None

    user = user_service.find_by_id(token.subject)
    if user is None:
        return None
    return Identity(user=user, token=token, expired=expired)


def login_required(allow_expired: bool = False):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity = authenticate_request(allow_expired=allow_expired)
            if identity is None:
                raise UnAuthorizedException("Missing or invalid access token")
            kwargs["current_user"] = identity.user
            return fn(*args, **kwargs)

        return wrapper

    return decorator
