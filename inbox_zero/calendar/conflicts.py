"""Conflict check — existing events touching a proposed time."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from inbox_zero.calendar.client import CALENDAR_ERRORS, UserCalendarClient, calendar_error
from inbox_zero.calendar.models import ConflictCheckResult, ConflictEvent
from inbox_zero.calendar.slots import localize, resolve_time_zone

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 2


def _raw_time(edge: dict[str, Any] | None) -> str | None:
    if not edge:
        return None
    return edge.get("dateTime") or edge.get("date")


def _parse_event_time(value: str, tz: ZoneInfo) -> datetime:
    """Parse an event boundary; all-day ``date`` values start at local midnight."""
    return localize(datetime.fromisoformat(value), tz)


def check_conflicts(
    client: UserCalendarClient,
    start_time: datetime,
    end_time: datetime,
    time_zone: str,
    window_hours: int = DEFAULT_WINDOW_HOURS,
) -> ConflictCheckResult:
    tz = resolve_time_zone(time_zone)
    proposed_start = localize(start_time, tz)
    proposed_end = localize(end_time, tz)
    window = timedelta(hours=window_hours)

    try:
        events = client.list_events(
            proposed_start - window, proposed_end + window, time_zone=tz.key
        )
    except CALENDAR_ERRORS as e:
        logger.error("Failed to fetch calendar events: %s", e)
        raise calendar_error(e, "Failed to fetch calendar events") from e

    logger.info("Retrieved %d calendar events around %s", len(events), proposed_start.isoformat())

    conflicts: list[ConflictEvent] = []
    for event in events:
        raw_start = _raw_time(event.get("start"))
        raw_end = _raw_time(event.get("end"))
        if not raw_start or not raw_end:
            logger.debug("Skipping event %s without start/end", event.get("id"))
            continue
        try:
            event_start = _parse_event_time(raw_start, tz)
            event_end = _parse_event_time(raw_end, tz)
        except ValueError:
            logger.warning("Unparseable times on event %s: %s / %s", event.get("id"), raw_start, raw_end)
            continue

        if event_start <= proposed_end and event_end >= proposed_start:
            logger.info("Found conflicting event %s (%s)", event.get("id"), event.get("summary"))
            conflicts.append(
                ConflictEvent(
                    id=event.get("id", ""),
                    summary=event.get("summary", ""),
                    start_time=raw_start,
                    end_time=raw_end,
                    attendees=[a["email"] for a in event.get("attendees", []) if a.get("email")],
                )
            )

    return ConflictCheckResult(has_conflicts=bool(conflicts), existing_events=conflicts)
