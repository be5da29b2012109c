from dotenv import load_dotenv, find_dotenv
import os
from functools import lru_cache

# Load .env files for local development
# override=False means real environment variables (set by the host) take precedence
load_dotenv(dotenv_path="default.env", override=False)
load_dotenv(dotenv_path=find_dotenv(".env"), override=False)

DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]


def _split_origins(raw: str | None) -> list[str]:
    if raw and raw.strip():
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    return list(DEFAULT_ORIGINS)


class Settings:
    # Database - DATABASE_URL wins (Render/Heroku style), otherwise assembled from DB_* parts
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "furama")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSL: str = os.getenv("DB_SSL", "")  # "true", "false" or unset (let libpq decide)
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))

    # HTTP
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    ALLOWED_ORIGINS: list[str] = _split_origins(os.getenv("ALLOWED_ORIGINS"))

    # Rate limiting - requests per IP per 15 minute window
    RATE_LIMIT_MAX: int = int(os.getenv("RATE_LIMIT_MAX", "100"))
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

    # JWT settings for authentication
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

    # Resend email settings
    RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
    RESEND_FROM_EMAIL: str = os.getenv("RESEND_FROM_EMAIL", "concierge@furamavietnam.com")
    HOTEL_NAME: str = os.getenv("HOTEL_NAME", "Furama Resort Danang")

    # Notification backend settings
    EMAIL_BACKEND: str = os.getenv("EMAIL_BACKEND", "console")  # "resend" or "console"

    # Checkout reminder sweep
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    CHECKOUT_REMINDER_INTERVAL_MINUTES: float = float(os.getenv("CHECKOUT_REMINDER_INTERVAL_MINUTES", "5"))
    CHECKOUT_REMINDER_WINDOW_MINUTES: int = int(os.getenv("CHECKOUT_REMINDER_WINDOW_MINUTES", "60"))

    DEV_MODE: bool = os.getenv("DEV_MODE", "true").lower() == "true"
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Ho_Chi_Minh")


@lru_cache()
def get_settings():
    return Settings()


# Create singleton instance for direct imports
settings = get_settings()
