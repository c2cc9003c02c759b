"""Domain exceptions. Each carries the HTTP status the API answers with."""

from __future__ import annotations


class InboxZeroError(Exception):
    """Base error; ``message`` is safe to show to the user."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotAuthenticatedError(InboxZeroError):
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class UserNotFoundError(InboxZeroError):
    status_code = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class InvalidRequestError(InboxZeroError):
    status_code = 400


class CalendarApiError(InboxZeroError):
    """The calendar provider answered with an error."""


class CalendarAuthError(CalendarApiError):
    status_code = 401

    def __init__(self, message: str = "Failed to authenticate with Google Calendar"):
        super().__init__(message)


class NoTimeSlotsError(InboxZeroError):
    status_code = 400

    def __init__(self, message: str = "No valid time slots found"):
        super().__init__(message)


class CalendarAnalysisError(InboxZeroError):
    """The LLM could not produce a usable calendar analysis."""


class CategorizationError(InboxZeroError):
    """Sender categorization failed for a whole batch."""
