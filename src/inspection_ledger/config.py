"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


@dataclass(frozen=True)
class CosmosConfig:
    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(default_factory=lambda: _env("COSMOS_DATABASE", "inspection-ledger"))
    container: str = field(default_factory=lambda: _env("COSMOS_CONTAINER", "inspection_ledger"))


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    secret_key: str = field(default_factory=lambda: _env("APP_SECRET_KEY"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    poll_seconds: float = field(
        default_factory=lambda: float(_env("CHANGE_FEED_POLL_SECONDS", "1.0"))
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Read ``.env`` (if present) and build the settings tree."""
    load_dotenv()
    return Settings()
