import logging
import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    database_url: str
    scoring_pin: str
    default_locale: str = "th"
    log_level: str = "INFO"

    @property
    def uses_memory_store(self) -> bool:
        return not self.database_url


def _normalize_database_url(value: Optional[str]) -> str:
    if not value:
        return ""
    normalized = value.strip()
    if normalized.startswith("postgres://"):
        return "postgresql://" + normalized[len("postgres://"):]
    return normalized


def load_settings() -> Settings:
    database_url = _normalize_database_url(os.getenv("DATABASE_URL"))
    scoring_pin = os.getenv("SCORING_PIN", "1234")
    default_locale = os.getenv("DEFAULT_LOCALE", "th").strip() or "th"
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    return Settings(
        database_url=database_url,
        scoring_pin=scoring_pin,
        default_locale=default_locale,
        log_level=log_level,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
