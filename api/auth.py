"""
Authentication blueprint (mounted under /api/user):
- GET  /oauth2/kakao?code=   Kakao login
- POST /login                email/password login
- GET  /logout               end the session
- GET  /refresh              new access token from the refresh cookie

Login responses carry the access token in the body and the refresh token in
an HttpOnly cookie scoped to the API path.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.user import LoginSchema
from services import auth_service
from services.auth_service import LoginResult
from utils.cookies import delete_refresh_cookie, get_refresh_cookie, set_refresh_cookie
from utils.decorators import get_token_provider, login_required

SUCCESS = "success"

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()


def _login_response(result: LoginResult):
    user = result.user
    response = jsonify(
        {
            "nickname": user.nickname,
            "picture": user.picture,
            "level": user.level,
            "experience": user.experience,
            "accessToken": result.tokens.access_token.token,
            "message": SUCCESS,
        }
    )
    set_refresh_cookie(response, result.tokens.refresh_token.token)
    return response, 200


@bp.get("/oauth2/kakao")
def kakao_login():
    """
    Kakao login with an authorization code.
    ---
    tags:
      - Auth
    parameters:
      - in: query
        name: code
        type: string
        required: true
    responses:
      200:
        description: OK (access token in body, refresh token cookie)
      400:
        description: Invalid or expired authorization code
    """
    code = request.args.get("code", "")
    result = auth_service.kakao_login(
        code, current_app.extensions["kakao_client"], get_token_provider()
    )
    return _login_response(result)


@bp.post("/login")
def login():
    """
    Login: access token in the body, refresh token in a cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      404:
        description: Unknown email or wrong password
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    result = auth_service.login_user(data["email"], data["password"], get_token_provider())
    return _login_response(result)


@bp.get("/logout")
@login_required()
def logout(current_user):
    """
    Logout: clears the stored refresh token and the cookie
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    auth_service.logout_user(current_user)
    response = jsonify({"message": SUCCESS})
    delete_refresh_cookie(response)
    return response, 200


@bp.get("/refresh")
@login_required(allow_expired=True)
def refresh(current_user):
    """
    Re-issue an access token. The bearer token may be expired but must be
    well signed; the refresh cookie must match the current session.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Missing, expired or revoked refresh token
    """
    access = auth_service.refresh_access_token(
        current_user, get_refresh_cookie(request), get_token_provider()
    )
    return jsonify({"accessToken": access.token, "message": SUCCESS}), 200
