from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..utils.project import get_project_name, get_project_version


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Values are read from the process environment first and from the `.env`
    file next to the package second, so a variable exported in the shell
    always wins over the file.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Application identity (served by /internal/info)
    APP_NAME: str = get_project_name(default="idm")
    APP_VERSION: str = get_project_version()

    # Database configuration. DATABASE_URL wins when set; otherwise the
    # POSTGRES_* parts are assembled into a postgresql+<driver> URL.
    DATABASE_URL: str | None = None
    POSTGRES_DRIVER: str = "asyncpg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_SIZE: int = 5

    # Deadlines (seconds). Repository calls use the short ones, the HTTP
    # boundary wraps the whole service call with the *_REQUEST_* ones.
    FIND_ALL_TIMEOUT: float = 2.0
    FIND_PAGE_TIMEOUT: float = 4.0
    FIND_ALL_REQUEST_TIMEOUT: float = 5.0
    FIND_PAGE_REQUEST_TIMEOUT: float = 8.0

    # JWT verification
    JWT_KEY: str | None = None
    JWT_ALGORITHMS: str = "RS256"  # comma separated
    JWT_AUDIENCE: str | None = None

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    SSL_CERTFILE: Path | None = None
    SSL_KEYFILE: Path | None = None

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/idm")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        Return the URL the engine should connect to.

        An explicit DATABASE_URL is returned untouched (this is how tests point
        the app at SQLite). Otherwise the URL is built from the POSTGRES_* parts.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )

    @property
    def jwt_algorithms(self) -> list[str]:
        return [part.strip() for part in self.JWT_ALGORITHMS.split(",") if part.strip()]

    @property
    def ssl_enabled(self) -> bool:
        return self.SSL_CERTFILE is not None and self.SSL_KEYFILE is not None

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """Logging expects upper-case level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def require_database(self) -> "Settings":
        if self.DATABASE_URL:
            return self
        missing = [
            name
            for name in ("POSTGRES_USERNAME", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_DB")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"Database is not configured: set DATABASE_URL or {', '.join(missing)}"
            )
        return self

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Built once by the entry point; everything else receives the instance explicitly.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
