"""
Refresh-token cookie helpers.

Only the refresh token ever travels in a cookie; the access token is returned
in the response body. Max-age is the refresh lifetime in seconds divided by 60,
which existing clients expect.
"""
from __future__ import annotations

from typing import Optional

from flask import Request, Response, current_app


def refresh_cookie_max_age() -> int:
    return int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds()) // 60


def get_refresh_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(current_app.config["REFRESH_TOKEN_COOKIE"])


def delete_refresh_cookie(response: Response) -> None:
    cfg = current_app.config
    response.delete_cookie(
        cfg["REFRESH_TOKEN_COOKIE"],
        path=cfg["REFRESH_COOKIE_PATH"],
        secure=cfg["REFRESH_COOKIE_SECURE"],
        httponly=True,
        samesite=cfg["REFRESH_COOKIE_SAMESITE"],
    )


def set_refresh_cookie(response: Response, token: str) -> None:
    """Delete then set, so a stale cookie with other attributes never lingers."""
    cfg = current_app.config
    delete_refresh_cookie(response)
    response.set_cookie(
        cfg["REFRESH_TOKEN_COOKIE"],
        token,
        max_age=refresh_cookie_max_age(),
        path=cfg["REFRESH_COOKIE_PATH"],
        secure=cfg["REFRESH_COOKIE_SECURE"],
        httponly=True,
        samesite=cfg["REFRESH_COOKIE_SAMESITE"],
    )
