from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "DS-Allroundservice"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    secret_key: str

    # Database
    database_url: str = "sqlite+aiosqlite:///./database.db"

    # Paths
    templates_dir: Path = Path(__file__).parent.parent / "templates"
    static_dir: Path = Path(__file__).parent.parent / "static"

    # Session
    session_cookie: str = "ds_session"
    session_expire_days: int = 30
    session_https_only: bool = True

    # Cookie consent
    consent_cookie_max_age: int = 30 * 24 * 60 * 60  # 30 days

    @property
    def async_database_url(self) -> str:
        url = self.database_url
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://")
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")


settings = Settings()
