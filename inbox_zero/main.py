"""Inbox Zero — FastAPI application entry point."""

from __future__ import annotations

import logging

import sentry_sdk
from fastapi import FastAPI

from inbox_zero.admin.setup import setup_admin
from inbox_zero.api.analyze import router as analyze_router
from inbox_zero.api.calendar import router as calendar_router
from inbox_zero.api.categorize import router as categorize_router
from inbox_zero.api.exception_handlers import setup_exception_handlers
from inbox_zero.api.health import router as health_router
from inbox_zero.api.reply_tracker import router as reply_tracker_router
from inbox_zero.api.rules import router as rules_router
from inbox_zero.api.stats import router as stats_router
from inbox_zero.api.watch import router as watch_router
from inbox_zero.calendar.analyze import CalendarAnalyzer
from inbox_zero.calendar.client import CalendarService
from inbox_zero.categorize.engine import CategorizationEngine
from inbox_zero.config import AppConfig, load_default_categories
from inbox_zero.db.connection import init_db
from inbox_zero.db.models import CategoryRepository, LLMCallRepository, NewsletterRepository
from inbox_zero.gmail.client import GmailService
from inbox_zero.llm.config import LLMConfig
from inbox_zero.llm.gateway import LLMGateway
from inbox_zero.middleware import BasicAuthMiddleware

logger = logging.getLogger(__name__)


def _init_sentry(dsn: str, environment: str) -> None:
    """Initialize Sentry SDK if a DSN is configured and not in development."""
    if not dsn or environment == "development":
        return
    sentry_sdk.init(
        dsn,
        environment=environment,
        send_default_pii=False,
        traces_sample_rate=0,
        send_client_reports=False,
    )


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = AppConfig.from_yaml()

    _init_sentry(config.sentry_dsn, config.environment)

    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    is_dev = config.environment == "development"

    app = FastAPI(
        title="Inbox Zero",
        version="1.0.0",
        description="AI-assisted inbox management",
        debug=is_dev,
    )

    db = init_db(config)
    app.state.config = config
    app.state.db = db

    # Shared services; clients per user are built on demand
    llm_gateway = LLMGateway(LLMConfig.from_app_config(config), call_repo=LLMCallRepository(db))
    app.state.llm_gateway = llm_gateway
    app.state.gmail_service = GmailService(config)
    app.state.calendar_service = CalendarService(config)
    app.state.calendar_analyzer = CalendarAnalyzer(
        llm_gateway, default_time_zone=config.calendar.default_time_zone
    )
    app.state.categorization_engine = CategorizationEngine(
        llm_gateway,
        CategoryRepository(db),
        NewsletterRepository(db),
        load_default_categories(),
    )

    # Basic auth middleware (disabled when credentials not configured)
    if config.server.admin_user and config.server.admin_password:
        app.add_middleware(
            BasicAuthMiddleware,
            username=config.server.admin_user,
            password=config.server.admin_password,
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(analyze_router)
    app.include_router(calendar_router)
    app.include_router(watch_router)
    app.include_router(categorize_router)
    app.include_router(stats_router)
    app.include_router(reply_tracker_router)
    app.include_router(rules_router)

    setup_admin(app, str(config.database.sqlite_path), debug=is_dev)

    logger.info("Inbox Zero app created (environment=%s)", config.environment)
    return app


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    config = AppConfig.from_yaml()
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )
