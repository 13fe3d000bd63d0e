# course_chat/config/settings.py
import os
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Main database (PostgreSQL). db_url wins when set (tests use SQLite).
    db_url: str | None = None
    db_host: str | None = None
    db_port: int = 5432
    db_name: str | None = None
    db_user: str | None = None
    db_password: str | None = None

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    app_prefix: str = os.getenv("APP_PREFIX", "/apps/course-chat")

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_access_minutes: int = int(os.getenv("JWT_ACCESS_MINUTES", "60"))
    jwt_issuer: str = os.getenv("JWT_ISSUER", "course-chat-api")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "course-chat-front")

    # Realtime
    socketio_async_mode: str = "eventlet"
    cors_origins_raw: str = os.getenv(
        "CORS_ORIGINS",
        ",".join(
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            ]
        ),
    )

    # Background pool for async sends
    async_max_workers: int = 8

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_url", "db_host", "db_name", "db_user", "db_password", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @field_validator("async_max_workers")
    @classmethod
    def positive_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("async_max_workers must be >= 1")
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user or "")
        password = quote_plus(self.db_password or "")
        host = self.db_host or "localhost"
        port = self.db_port
        db = self.db_name or "course_chat"

        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"


settings = Settings()
