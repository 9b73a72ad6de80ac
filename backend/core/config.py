import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV.lower() == "production"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./auth.db")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
SESSION_TOKEN_DAYS = int(os.getenv("SESSION_TOKEN_DAYS", "7"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "token")
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=IS_PRODUCTION)

VERIFICATION_CODE_HOURS = int(os.getenv("VERIFICATION_CODE_HOURS", "24"))
RESET_TOKEN_HOURS = int(os.getenv("RESET_TOKEN_HOURS", "1"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")
CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), [CLIENT_URL])

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = _get_bool(os.getenv("SMTP_USE_TLS"), default=True)
EMAIL_FROM = os.getenv("EMAIL_FROM", SMTP_USER)
EMAIL_FROM_NAME = os.getenv("EMAIL_FROM_NAME", "Classroom Auth")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def validate_runtime_config() -> None:
    if IS_PRODUCTION and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if IS_PRODUCTION and not SMTP_HOST:
        raise RuntimeError("SMTP_HOST must be set in production.")
