"""Application configuration — env vars, YAML files, defaults."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


def _repo_root() -> Path:
    """Find the repository root (directory containing pyproject.toml)."""
    current = Path(__file__).resolve().parent.parent
    if (current / "pyproject.toml").exists():
        return current
    return Path.cwd()


REPO_ROOT = _repo_root()


class AuthMode(str, Enum):
    SERVICE_ACCOUNT = "service_account"
    PERSONAL_OAUTH = "personal_oauth"


class AuthConfig(BaseSettings):
    mode: AuthMode = AuthMode.SERVICE_ACCOUNT
    credentials_file: Path = REPO_ROOT / "config" / "credentials.json"
    token_file: Path = REPO_ROOT / "config" / "token.json"
    service_account_file: Path = REPO_ROOT / "config" / "service-account-key.json"
    scopes: list[str] = [
        "https://www.googleapis.com/auth/gmail.modify",
        "https://www.googleapis.com/auth/calendar",
    ]

    model_config = {"env_prefix": "IZ_AUTH_"}


class DatabaseConfig(BaseSettings):
    sqlite_path: Path = REPO_ROOT / "data" / "inbox_zero.db"
    connect_retries: int = 3
    connect_retry_delay_ms: int = 50

    model_config = {"env_prefix": "IZ_DB_"}


class LLMSettings(BaseSettings):
    default_model: str = "gemini/gemini-2.0-flash"
    calendar_model: str = "gemini/gemini-2.0-flash"
    categorize_model: str = "gemini/gemini-2.0-flash"
    max_calendar_tokens: int = 1024
    max_categorize_tokens: int = 2048

    model_config = {"env_prefix": "IZ_LLM_"}


class CalendarConfig(BaseSettings):
    default_time_zone: str = "UTC"
    conflict_window_hours: int = 2
    max_proposals: int = 5

    model_config = {"env_prefix": "IZ_CALENDAR_"}


class SyncConfig(BaseSettings):
    pubsub_topic: str = ""

    model_config = {"env_prefix": "IZ_SYNC_"}


class ServerConfig(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    admin_user: str = ""
    admin_password: str = ""
    cron_secret: str = ""
    internal_api_key: str = ""
    # When set, sender categorization batches arrive through the queue and
    # the direct "simple" endpoint is disabled.
    queue_token: str = ""

    model_config = {"env_prefix": "IZ_SERVER_"}


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    auth: AuthConfig = Field(default_factory=AuthConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # Environment & Sentry
    environment: str = "development"
    sentry_dsn: str = ""

    model_config = {"env_prefix": "IZ_"}

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> AppConfig:
        """Load config from YAML file, with env var overrides."""
        if path is None:
            path = REPO_ROOT / "config" / "app.yml"

        values: dict[str, Any] = {}
        if path.exists():
            with open(path) as f:
                values = yaml.safe_load(f) or {}

        return cls(**values)


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML config file from the config directory."""
    path = REPO_ROOT / "config" / filename
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_default_categories() -> list[dict[str, str]]:
    """Load sender categories from categories.yml (empty list when absent)."""
    categories = load_yaml_config("categories.yml").get("categories", [])
    if not categories:
        logger.warning(
            "No default categories found in %s; senders will be stored uncategorized",
            REPO_ROOT / "config" / "categories.yml",
        )
    return categories
