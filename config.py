import logging
from dataclasses import dataclass, field
from os import environ

from dotenv import load_dotenv

load_dotenv()


def _getenv_bool(name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_int(name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_list(name: str, default: list[str]) -> list[str]:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str | None = field(
        default_factory=lambda: environ.get("URL_DATABASE")
    )
    sql_echo: bool = field(default_factory=lambda: _getenv_bool("SQL_ECHO", False))

    jwt_secret_key: str = field(
        default_factory=lambda: environ.get(
            "JWT_SECRET_KEY", "your-secret-key-change-in-production"
        )
    )
    jwt_expires_hours: int = field(
        default_factory=lambda: _getenv_int("JWT_EXPIRES_HOURS", 24)
    )

    cors_origins: list[str] = field(
        default_factory=lambda: _getenv_list("CORS_ORIGINS", ["http://localhost:5173"])
    )

    rate_limit_enabled: bool = field(
        default_factory=lambda: _getenv_bool("RATE_LIMIT_ENABLED", True)
    )

    log_level: str = field(default_factory=lambda: environ.get("LOG_LEVEL", "INFO"))


settings = Settings()


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
