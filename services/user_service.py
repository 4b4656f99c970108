"""
User store: every read and write of the users table goes through here.

Refresh-token writes are single UPDATE statements so each login, refresh and
logout is one atomic read-modify-write of one row (last write wins).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import storage
from models.user import User
from utils.exceptions import DuplicateException, NotFoundException
from utils.security import hash_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KakaoProfile:
    kakao_id: int
    nickname: str
    picture: Optional[str] = None


@dataclass(frozen=True)
class ExperienceResult:
    level: int
    experience: int
    level_up: bool


def _session():
    return storage.get_session()


def find_by_id(user_id) -> Optional[User]:
    try:
        return storage.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


def get_by_id(user_id) -> User:
    user = find_by_id(user_id)
    if not user:
        raise NotFoundException("User not found")
    return user


def find_by_email(email: str) -> Optional[User]:
    return _session().query(User).filter(User.email == email).first()


def find_by_kakao_id(kakao_id: int) -> Optional[User]:
    return _session().query(User).filter(User.kakao_id == kakao_id).first()


def is_duplicate_email(email: str) -> bool:
    return _session().query(User.id).filter(User.email == email).first() is not None


def is_duplicate_nickname(nickname: str) -> bool:
    return _session().query(User.id).filter(User.nickname == nickname).first() is not None


def duplicate_email(email: str) -> None:
    if is_duplicate_email(email):
        raise DuplicateException("Email already registered")


def duplicate_nickname(nickname: str) -> None:
    if is_duplicate_nickname(nickname):
        raise DuplicateException("Nickname already in use")


def create_user(email: str, password: str, nickname: str, picture: str | None = None) -> User:
    duplicate_email(email)
    duplicate_nickname(nickname)
    user = User(
        email=email,
        password_hash=hash_password(password),
        nickname=nickname,
        picture=picture,
        level=current_app.config["DEFAULT_LEVEL"],
        experience=0,
    )
    storage.new(user)
    storage.save()
    logger.info("Created user id=%s", user.id)
    return user


def _free_nickname(nickname: str) -> str:
    if not is_duplicate_nickname(nickname):
        return nickname
    n = 1
    while is_duplicate_nickname(f"{nickname}{n}"):
        n += 1
    return f"{nickname}{n}"


def create_user_from_kakao(profile: KakaoProfile) -> User:
    """OAuth-only account: no email, no password hash."""
    user = User(
        kakao_id=profile.kakao_id,
        nickname=_free_nickname(profile.nickname or "kakao"),
        picture=profile.picture,
        level=current_app.config["DEFAULT_LEVEL"],
        experience=0,
    )
    storage.new(user)
    storage.save()
    logger.info("Created user id=%s from kakao account", user.id)
    return user


def update_user(user_id, nickname: str | None = None, picture: str | None = None,
                password: str | None = None) -> User:
    user = get_by_id(user_id)
    if nickname and nickname != user.nickname:
        duplicate_nickname(nickname)
        user.nickname = nickname
    if picture is not None:
        user.picture = picture
    if password:
        user.password_hash = hash_password(password)
    storage.new(user)
    storage.save()
    return user


def _write_refresh_token(user_id, token: Optional[str]) -> None:
    session = _session()
    try:
        session.query(User).filter(User.id == user_id).update(
            {User.refresh_token: token}, synchronize_session=False
        )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    # keep any loaded instance in step with the row
    user = session.get(User, user_id)
    if user is not None:
        session.refresh(user)


def save_refresh_token(user_id, token: str) -> None:
    _write_refresh_token(user_id, token)


def delete_refresh_token(user_id) -> None:
    _write_refresh_token(user_id, None)


def update_experience(user_id, gained: int) -> ExperienceResult:
    user = get_by_id(user_id)
    cfg = current_app.config
    before = user.level
    user.experience = max(0, user.experience + gained)
    user.level = cfg["DEFAULT_LEVEL"] + user.experience // cfg["LEVEL_UP_EXPERIENCE"]
    storage.new(user)
    storage.save()
    return ExperienceResult(level=user.level, experience=user.experience, level_up=user.level > before)


def top_users(n: int) -> List[User]:
    """Highest experience first; ties keep insertion (id) order."""
    return (
        _session()
        .query(User)
        .order_by(User.experience.desc(), User.id.asc())
        .limit(n)
        .all()
    )


def count_users() -> int:
    return _session().query(func.count(User.id)).scalar()
