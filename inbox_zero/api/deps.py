"""Request dependencies — the signed-in user and app-wide services."""

from __future__ import annotations

from fastapi import Header, Request

from inbox_zero.calendar.client import UserCalendarClient
from inbox_zero.db.connection import get_db
from inbox_zero.db.models import User, UserRepository
from inbox_zero.errors import NotAuthenticatedError, UserNotFoundError
from inbox_zero.gmail.client import UserGmailClient


def get_current_user(x_user_email: str | None = Header(default=None)) -> User:
    """The user named by the ``X-User-Email`` header set by the auth proxy."""
    if not x_user_email:
        raise NotAuthenticatedError()
    user = UserRepository(get_db()).get_by_email(x_user_email.strip())
    if not user:
        raise UserNotFoundError()
    return user


def calendar_client_for(request: Request, user: User) -> UserCalendarClient:
    return request.app.state.calendar_service.for_user(user.email)


def gmail_client_for(request: Request, user: User) -> UserGmailClient:
    return request.app.state.gmail_service.for_user(user.email)
