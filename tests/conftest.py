"""Shared fixtures — temporary database, app with mocked Google/LLM services."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from inbox_zero.config import AppConfig, DatabaseConfig, ServerConfig, SyncConfig
from inbox_zero.db.connection import Database
from inbox_zero.db.models import PremiumRepository, UserRepository

CRON_SECRET = "cron-test-secret"
INTERNAL_API_KEY = "internal-test-key"
USER_EMAIL = "user@example.com"


@pytest.fixture
def config(tmp_path):
    config = AppConfig()
    config.database = DatabaseConfig(sqlite_path=tmp_path / "test.db")
    config.server = ServerConfig(cron_secret=CRON_SECRET, internal_api_key=INTERNAL_API_KEY)
    config.sync = SyncConfig(pubsub_topic="projects/test/topics/gmail")
    config.environment = "test"
    return config


@pytest.fixture
def db(config):
    """Create a temporary database for testing."""
    database = Database(config)
    database.initialize_schema()
    return database


@pytest.fixture
def user(db):
    """A premium user with AI automation unlocked."""
    premium_id = PremiumRepository(db).create(tier="BUSINESS_MONTHLY", ai_automation_access="UNLOCKED")
    user_id = UserRepository(db).create(USER_EMAIL, "Test User", premium_id=premium_id, time_zone="Europe/Prague")
    return UserRepository(db).get_by_id(user_id)


@pytest.fixture
def app(config, db):
    from inbox_zero.main import create_app

    app = create_app(config)
    app.state.gmail_service = MagicMock()
    app.state.calendar_service = MagicMock()
    app.state.calendar_analyzer = MagicMock()
    app.state.categorization_engine = MagicMock()
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth_headers(user):
    return {"X-User-Email": user.email}
