"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_NAME: str = "SAP Basis Jahresplaner"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Database (embedded SQLite file)
    DATABASE_PATH: str = "sap-planner.db"

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{Path(self.DATABASE_PATH)}"

    # Audit log file, rotated in place once it reaches AUDIT_LOG_MAX_BYTES
    AUDIT_LOG_FILE: str = "server.log"
    AUDIT_LOG_MAX_BYTES: int = 1024 * 1024

    # Sessions
    SESSION_TTL_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "auth_token"
    COOKIE_SECURE: bool = False

    # Seed admin user
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "change-me-in-production"

    # Default planner settings
    DEFAULT_YEAR: str = "2026"
    DEFAULT_BUNDESLAND: str = "BW"

    # Rate limiting (fixed window, per client address)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "300/15minutes"
    RATE_LIMIT_LOGIN: str = "10/15minutes"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3232", "http://localhost:5173"]

    # Request bodies above this size are rejected with 413
    MAX_BODY_BYTES: int = 10 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
