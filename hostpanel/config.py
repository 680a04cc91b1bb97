from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ── Known insecure default passwords (must never be used in production) ──
_INSECURE_PASSWORDS = {"", "root", "password", "changeme"}


class Settings(BaseSettings):
    APP_NAME: str = "HostPanel"
    APP_ENV: str = "development"
    APP_VERSION: str = "1.5.3"
    API_V1_STR: str = "/api/v1"

    # Database (panel store; also holds the customer SQL grant tables)
    DB_DRIVER: str = "mysql+pymysql"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "hostpanel"
    DB_PASSWORD: str = "changeme"
    DB_NAME: str = "hostpanel"
    DATABASE_URL: Optional[str] = None  # overrides the DB_* fields when set
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 1800
    SLOW_QUERY_THRESHOLD_MS: int = 500

    # Provisioning daemon
    DAEMON_NOTIFY_MODE: str = "socket"  # socket / none
    DAEMON_HOST: str = "127.0.0.1"
    DAEMON_PORT: int = 9876
    DAEMON_TIMEOUT: float = 5.0  # seconds, per socket operation

    # Suspending a customer also stops SMTP for its mail accounts
    HARD_MAIL_SUSPENSION: bool = True
    # abuse@, hostmaster@, postmaster@ and webmaster@ forwards cannot be deleted
    PROTECT_DEFAULT_MAIL_ADDRESSES: bool = True

    # Celery (redis broker)
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    RECONCILE_SWEEP_INTERVAL: int = 600  # seconds

    # CORS
    BACKEND_CORS_ORIGINS: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @model_validator(mode="after")
    def _validate_production_security(self) -> "Settings":
        """Block startup if the database password is a known default in production / staging."""
        if self.APP_ENV in ("production", "staging") and not self.DATABASE_URL:
            if self.DB_PASSWORD in _INSECURE_PASSWORDS:
                raise ValueError(
                    "DB_PASSWORD is set to an insecure default. "
                    "Set a strong password in .env or environment."
                )
        if self.DAEMON_NOTIFY_MODE not in ("socket", "none"):
            raise ValueError(f"Unknown DAEMON_NOTIFY_MODE: {self.DAEMON_NOTIFY_MODE!r}")
        return self

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_staging(self) -> bool:
        return self.APP_ENV == "staging"


settings = Settings()
