"""Admin setup — create engine and mount SQLAdmin."""

from __future__ import annotations

from fastapi import FastAPI
from sqladmin import Admin
from sqlalchemy import create_engine

from inbox_zero.admin.views import (
    CalendarEventAdmin,
    ExecutedActionAdmin,
    ExecutedRuleAdmin,
    LLMCallAdmin,
    NewsletterAdmin,
    PremiumAdmin,
    ThreadTrackerAdmin,
    UserAdmin,
)

ADMIN_VIEWS = (
    UserAdmin,
    PremiumAdmin,
    CalendarEventAdmin,
    NewsletterAdmin,
    ExecutedRuleAdmin,
    ExecutedActionAdmin,
    ThreadTrackerAdmin,
    LLMCallAdmin,
)


def setup_admin(app: FastAPI, sqlite_path: str, *, debug: bool = False) -> Admin:
    """Mount the read-only admin interface at ``/admin``.

    The engine reads the same SQLite file the app writes; WAL mode lets
    both work concurrently.
    """
    engine = create_engine(
        f"sqlite:///{sqlite_path}",
        connect_args={"check_same_thread": False},
    )

    admin = Admin(
        app,
        engine,
        title="Inbox Zero Admin",
        base_url="/admin",
        debug=debug,
    )
    for view in ADMIN_VIEWS:
        admin.add_view(view)
    return admin
