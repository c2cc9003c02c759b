"""Calendar event creation and the record of events created from emails."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from inbox_zero.calendar.client import CALENDAR_ERRORS, UserCalendarClient, calendar_error
from inbox_zero.calendar.models import CreatedEvent, CreateEventRequest, UpdateEventRequest
from inbox_zero.db.models import CalendarEventRepository, User
from inbox_zero.errors import InboxZeroError, InvalidRequestError

logger = logging.getLogger(__name__)


def _build_event_body(
    *,
    summary: str | None = None,
    description: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    time_zone: str | None = None,
    attendees: list[str] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if summary is not None:
        body["summary"] = summary
    if description is not None:
        body["description"] = description
    if start_time is not None:
        body["start"] = {"dateTime": start_time, "timeZone": time_zone}
    if end_time is not None:
        body["end"] = {"dateTime": end_time, "timeZone": time_zone}
    if attendees is not None:
        body["attendees"] = [{"email": email} for email in attendees]
    return body


def create_calendar_event(
    client: UserCalendarClient,
    events: CalendarEventRepository,
    user: User,
    request: CreateEventRequest,
    default_time_zone: str,
) -> dict[str, Any]:
    """Create an event on the user's primary calendar.

    When the request names the thread and message it came from, the event
    is recorded so the email view can show it was already scheduled.
    """
    time_zone = request.time_zone or user.time_zone or default_time_zone
    body = _build_event_body(
        summary=request.summary,
        description=request.description,
        start_time=request.start_time,
        end_time=request.end_time,
        time_zone=time_zone,
        attendees=request.attendees,
    )

    try:
        event = client.create_event(body)
    except CALENDAR_ERRORS as e:
        logger.error("Failed to create calendar event for %s: %s", user.email, e)
        raise calendar_error(e, "Failed to create calendar event", use_google_message=True) from e

    event_id = event.get("id", "")
    logger.info("Created calendar event %s for %s", event_id, user.email)

    if request.thread_id and request.message_id:
        events.record(
            user.id,
            request.thread_id,
            request.message_id,
            summary=request.summary,
            description=request.description,
            start_time=request.start_time,
            end_time=request.end_time,
            time_zone=time_zone,
            attendees=request.attendees or [],
            google_event_id=event_id,
        )

    return {"success": True, "eventId": event_id, "htmlLink": event.get("htmlLink")}


def update_calendar_event(
    client: UserCalendarClient,
    events: CalendarEventRepository,
    user: User,
    event_id: str,
    request: UpdateEventRequest,
    default_time_zone: str,
) -> dict[str, Any]:
    fields = request.model_dump(exclude_none=True)
    if not fields:
        raise InvalidRequestError("Invalid request: nothing to update")

    tracked = events.get_by_google_event_id(user.id, event_id)
    time_zone = (
        request.time_zone
        or (tracked or {}).get("time_zone")
        or user.time_zone
        or default_time_zone
    )
    body = _build_event_body(
        summary=request.summary,
        description=request.description,
        start_time=request.start_time,
        end_time=request.end_time,
        time_zone=time_zone,
        attendees=request.attendees,
    )

    try:
        client.update_event(event_id, body)
    except CALENDAR_ERRORS as e:
        logger.error("Failed to update calendar event %s: %s", event_id, e)
        raise calendar_error(e, "Failed to update calendar event", use_google_message=True) from e

    if tracked:
        events.update_details(user.id, event_id, **fields)
    logger.info("Updated calendar event %s (%s)", event_id, ", ".join(sorted(fields)))
    return {"success": True, "eventId": event_id}


def get_event_created(
    events: CalendarEventRepository, user_id: int, thread_id: str, message_id: str
) -> dict[str, Any]:
    row = events.find(user_id, thread_id, message_id)
    logger.info(
        "Checked calendar event for thread %s message %s: exists=%s",
        thread_id,
        message_id,
        row is not None,
    )
    if row is None:
        return {"exists": False}

    try:
        event = CreatedEvent.model_validate(row)
    except ValidationError as e:
        logger.error("Invalid event data in database for row %s: %s", row.get("id"), e)
        raise InboxZeroError("Invalid event data in database", 500) from e

    return {"exists": True, "event": event.to_api()}
