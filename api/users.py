from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.user import SignupSchema, UserUpdateSchema, UserOutSchema, RankingOutSchema
from services import user_service
from utils.decorators import login_required

SUCCESS = "success"

bp = Blueprint("users", __name__)

signup_schema = SignupSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()
ranking_out_schema = RankingOutSchema(many=True)


@bp.get("/signup/email/<email>")
def duplicate_email(email: str):
    """
    Email duplicate check
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: email
        type: string
        required: true
    responses:
      200: { description: Available }
      409: { description: Already registered }
    """
    user_service.duplicate_email(email.strip().lower())
    return jsonify({"message": SUCCESS}), 200


@bp.get("/signup/nickname/<nickname>")
def duplicate_nickname(nickname: str):
    """
    Nickname duplicate check
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: nickname
        type: string
        required: true
    responses:
      200: { description: Available }
      409: { description: Already in use }
    """
    user_service.duplicate_nickname(nickname)
    return jsonify({"message": SUCCESS}), 200


@bp.post("/signup")
def signup():
    """
    register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
            nickname: { type: string }
            picture: { type: string }
    responses:
      200:
        description: Created
      409:
        description: Email or nickname already in use
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = signup_schema.load(payload)
    user_service.create_user(
        email=data["email"],
        password=data["password"],
        nickname=data["nickname"].strip(),
        picture=data.get("picture"),
    )
    return jsonify({"message": SUCCESS}), 200


@bp.get("/profile")
@login_required()
def get_profile(current_user):
    """
    Get current user info. Email and Kakao id are both returned so either
    kind of account can be shown.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = user_service.get_by_id(current_user.id)
    return jsonify(user_out_schema.dump(user)), 200


@bp.put("/profile")
@login_required()
def update_profile(current_user):
    """
    Update nickname, picture or password
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            nickname: { type: string }
            picture: { type: string }
            password: { type: string }
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      409: { description: Nickname already in use }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    nickname = data.get("nickname")
    user_service.update_user(
        current_user.id,
        nickname=nickname.strip() if nickname else None,
        picture=data.get("picture"),
        password=data.get("password"),
    )
    return jsonify({"message": SUCCESS}), 200


@bp.put("/game/<int(signed=True):experience>")
@login_required()
def update_experience(experience: int, current_user):
    """
    Add the experience gained in a game
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: experience
        type: integer
        required: true
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    result = user_service.update_experience(current_user.id, experience)
    return jsonify(
        {
            "level": result.level,
            "experience": result.experience,
            "levelUp": result.level_up,
            "message": SUCCESS,
        }
    ), 200


@bp.get("/ranking")
def ranking():
    """
    Live ranking: top users by experience
    ---
    tags:
      - Users
    responses:
      200: { description: OK }
    """
    rows = user_service.top_users(current_app.config["RANKING_SIZE"])
    return jsonify(ranking_out_schema.dump(rows)), 200
