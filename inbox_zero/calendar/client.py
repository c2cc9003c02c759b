"""Google Calendar API client — per-user wrapper over the discovery client."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from google.auth.exceptions import RefreshError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from inbox_zero.config import AppConfig
from inbox_zero.errors import CalendarApiError, CalendarAuthError
from inbox_zero.google.auth import GoogleAuth
from inbox_zero.google.retry import execute_with_retry, http_status

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR = "primary"

# Failures of a calendar call: HTTP errors from the API, or revoked credentials
CALENDAR_ERRORS = (HttpError, RefreshError)


class CalendarService:
    """Top-level Calendar service — creates per-user clients."""

    def __init__(self, config: AppConfig):
        self.auth = GoogleAuth(config)
        self.config = config

    def for_user(self, user_email: str | None = None) -> UserCalendarClient:
        creds = self.auth.get_credentials(user_email)
        service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        return UserCalendarClient(service, user_email or "me")


class UserCalendarClient:
    """Calendar operations for a single user. Google errors propagate as ``HttpError``."""

    def __init__(self, service: Any, user_email: str):
        self.service = service
        self.user_email = user_email

    def _exec(self, request: Any, operation: str = "API call") -> Any:
        return execute_with_retry(request, operation=operation)

    def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str | None = None,
        calendar_id: str = PRIMARY_CALENDAR,
    ) -> list[dict[str, Any]]:
        """Expanded (single) events overlapping [time_min, time_max]."""
        events: list[dict[str, Any]] = []
        page_token = None
        while True:
            params: dict[str, Any] = {
                "calendarId": calendar_id,
                "timeMin": time_min.isoformat(),
                "timeMax": time_max.isoformat(),
                "singleEvents": True,
                "orderBy": "startTime",
            }
            if time_zone:
                params["timeZone"] = time_zone
            if page_token:
                params["pageToken"] = page_token
            result = self._exec(self.service.events().list(**params), operation="events.list")
            events.extend(result.get("items", []))
            page_token = result.get("nextPageToken")
            if not page_token:
                return events

    def free_busy(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
        calendar_ids: list[str] | None = None,
    ) -> list[dict[str, str]]:
        """Busy periods (``{"start", "end"}``) across the given calendars."""
        ids = calendar_ids or [PRIMARY_CALENDAR]
        body = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": time_zone,
            "items": [{"id": cid} for cid in ids],
        }
        result = self._exec(self.service.freebusy().query(body=body), operation="freebusy.query")
        busy: list[dict[str, str]] = []
        for cid in ids:
            calendar = result.get("calendars", {}).get(cid, {})
            for error in calendar.get("errors", []):
                logger.warning("Free/busy error for calendar %s: %s", cid, error)
            busy.extend(calendar.get("busy", []))
        return busy

    def create_event(
        self, body: dict[str, Any], calendar_id: str = PRIMARY_CALENDAR
    ) -> dict[str, Any]:
        return self._exec(
            self.service.events().insert(calendarId=calendar_id, body=body),
            operation="events.insert",
        )

    def update_event(
        self, event_id: str, body: dict[str, Any], calendar_id: str = PRIMARY_CALENDAR
    ) -> dict[str, Any]:
        """Patch only the fields present in ``body``."""
        return self._exec(
            self.service.events().patch(calendarId=calendar_id, eventId=event_id, body=body),
            operation=f"events.patch({event_id})",
        )


def google_error_message(exc: HttpError) -> str | None:
    """The ``error.message`` Google puts in an error response body, if any."""
    try:
        payload = json.loads(exc.content.decode("utf-8") if isinstance(exc.content, bytes) else exc.content)
    except (TypeError, ValueError, AttributeError):
        return None
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    return None


def calendar_error(exc: Exception, message: str, *, use_google_message: bool = False) -> CalendarApiError:
    """Map a Google API failure to the error the API layer answers with.

    Rejected or revoked credentials become ``CalendarAuthError`` (401);
    other HTTP statuses are passed through, anything else is a 500.
    """
    status = http_status(exc)
    if status == 401 or isinstance(exc, RefreshError):
        return CalendarAuthError()
    if use_google_message and isinstance(exc, HttpError):
        message = google_error_message(exc) or message
    return CalendarApiError(message, status or 500)
