"""
Environment-aware configuration.
Token lifetimes, the refresh cookie, the Kakao provider and the database URL
are all read from the environment (.env is loaded when present).
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///songeoreum.db")

    # jwt configurations
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "1800")))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "1209600")))
    REFRESH_TOKEN_SUBJECT = os.getenv("REFRESH_TOKEN_SUBJECT", "songeoreum-refresh")
    DEFAULT_ROLE = os.getenv("DEFAULT_ROLE", "USER")
    # Compare the cookie refresh token against the stored one, not only its nullness
    REFRESH_TOKEN_STRICT_MATCH = _env_bool("REFRESH_TOKEN_STRICT_MATCH", "true")

    REFRESH_TOKEN_COOKIE = os.getenv("REFRESH_TOKEN_COOKIE", "refresh_token")
    REFRESH_COOKIE_PATH = os.getenv("REFRESH_COOKIE_PATH", "/api/user")
    REFRESH_COOKIE_SECURE = _env_bool("REFRESH_COOKIE_SECURE", "false")
    REFRESH_COOKIE_SAMESITE = os.getenv("REFRESH_COOKIE_SAMESITE", "Lax")

    # Kakao OAuth2
    KAKAO_CLIENT_ID = os.getenv("KAKAO_CLIENT_ID", "")
    KAKAO_CLIENT_SECRET = os.getenv("KAKAO_CLIENT_SECRET", "")
    KAKAO_REDIRECT_URI = os.getenv("KAKAO_REDIRECT_URI", "http://localhost:3000/oauth/kakao/callback")
    KAKAO_TOKEN_URL = os.getenv("KAKAO_TOKEN_URL", "https://kauth.kakao.com/oauth/token")
    KAKAO_PROFILE_URL = os.getenv("KAKAO_PROFILE_URL", "https://kapi.kakao.com/v2/user/me")
    OAUTH_HTTP_TIMEOUT = float(os.getenv("OAUTH_HTTP_TIMEOUT", "5"))

    # Game
    RANKING_SIZE = int(os.getenv("RANKING_SIZE", "10"))
    LEVEL_UP_EXPERIENCE = int(os.getenv("LEVEL_UP_EXPERIENCE", "100"))
    DEFAULT_LEVEL = 1


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    JWT_SECRET = "test-secret"
    REFRESH_TOKEN_STRICT_MATCH = True
    KAKAO_CLIENT_ID = "test-client"


class ProductionConfig(BaseConfig):
    DEBUG = False
    JWT_SECRET = os.getenv("JWT_SECRET")
    REFRESH_COOKIE_SECURE = _env_bool("REFRESH_COOKIE_SECURE", "true")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    if name:
        name = name.lower()
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
