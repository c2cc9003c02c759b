"""Alternative meeting times — free slots near the original, best first."""

from __future__ import annotations

import logging
from datetime import datetime

from inbox_zero.calendar.client import CALENDAR_ERRORS, UserCalendarClient, calendar_error
from inbox_zero.calendar.models import EventCategory, TimeProposal, TimeSlot
from inbox_zero.calendar.slots import generate_time_slots, localize, resolve_time_zone, score_slot
from inbox_zero.errors import NoTimeSlotsError

logger = logging.getLogger(__name__)

MAX_PROPOSALS = 5


def _is_busy(slot: TimeSlot, busy: list[tuple[datetime, datetime]]) -> bool:
    return any(b_start < slot.end and b_end > slot.start for b_start, b_end in busy)


def suggest_times(
    client: UserCalendarClient,
    start_time: datetime,
    end_time: datetime,
    time_zone: str,
    attendees: list[str],
    event_category: EventCategory | None = None,
    max_proposals: int = MAX_PROPOSALS,
) -> list[TimeProposal]:
    """Top free slots by score. Only the organizer's primary calendar is checked.

    Raises ``NoTimeSlotsError`` when no candidate slot exists at all and
    ``CalendarAuthError`` when Google rejects our credentials.
    """
    tz = resolve_time_zone(time_zone)
    original_start = localize(start_time, tz)
    original_end = localize(end_time, tz)

    slots = generate_time_slots(original_start, original_end, tz)
    if not slots:
        logger.error("No time slots generated for %s", original_start.isoformat())
        raise NoTimeSlotsError()
    logger.info(
        "Generated %d slots (%s .. %s) for %d attendees%s",
        len(slots),
        slots[0].start.isoformat(),
        slots[-1].start.isoformat(),
        len(attendees),
        f", category {event_category.category.primary}" if event_category else "",
    )

    horizon_start = min(s.start for s in slots)
    horizon_end = max(s.end for s in slots)
    try:
        periods = client.free_busy(horizon_start, horizon_end, tz.key)
    except CALENDAR_ERRORS as e:
        logger.error("Failed to fetch free/busy data: %s", e)
        raise calendar_error(e, "Failed to suggest alternative times") from e

    busy = [
        (localize(datetime.fromisoformat(p["start"]), tz), localize(datetime.fromisoformat(p["end"]), tz))
        for p in periods
    ]

    proposals = []
    skipped = 0
    for slot in slots:
        if _is_busy(slot, busy):
            skipped += 1
            continue
        proposals.append(
            TimeProposal(
                start_time=slot.start.isoformat(),
                end_time=slot.end.isoformat(),
                attendee_availability={},
                score=score_slot(slot, original_start),
            )
        )

    # sorted() is stable, so equal scores keep generation order
    proposals = sorted(proposals, key=lambda p: p.score, reverse=True)[:max_proposals]
    logger.info(
        "Suggest times: %d slots, %d busy, returning scores %s",
        len(slots),
        skipped,
        [p.score for p in proposals],
    )
    return proposals
