"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./quorumboard.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30

    # Links in share texts and reset emails point at the web client
    PUBLIC_BASE_URL: str = "http://localhost:3000"
    TIMEZONE: str = "Asia/Tokyo"  # IANA tz
    DEFAULT_START_TIME: str = "20:00"

    MAILGUN_API_KEY: str = ""
    MAILGUN_DOMAIN: str = ""
    MAILGUN_BASE_URL: str = "https://api.mailgun.net"
    MAIL_FROM: str = "Quorum Board <noreply@quorumboard.local>"

    class Config:
        env_file = ".env"


settings = Settings()
