import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Emulation Tracker"
    SECRET_KEY: str = "emulation-tracker-secret"
    ROOT_PATH: str = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))

    STORE_BACKEND: Literal["sql", "mongo"] = "sql"
    DATABASE_URL: str = "sqlite:///data/emulation.db"
    SQL_ECHO: bool = False
    MONGO_URL: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "emulation"
    MONGO_WRITE_JOURNAL: bool = True

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    SEED_DEFAULT_BUTTONS: bool = True
    DEFAULT_POINTS: float = 100

    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60  # 7 days
    SESSION_COOKIE_SAMESITE: str = "lax"
    SESSION_COOKIE_SECURE: bool = False

    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @property
    def sqlalchemy_database_url(self) -> str:
        """DATABASE_URL with a relative sqlite path anchored at ROOT_PATH."""
        uri = self.DATABASE_URL
        if uri.startswith("sqlite:///") and not uri.startswith("sqlite:////"):
            rel = uri.replace("sqlite:///", "", 1)
            if rel and rel != ":memory:" and not os.path.isabs(rel):
                abs_path = os.path.join(self.ROOT_PATH, rel)
                # Normalize backslashes to forward slashes for SQLAlchemy/SQLite
                abs_path = abs_path.replace("\\", "/")
                return f"sqlite:///{abs_path}"
        return uri


settings = Settings()
