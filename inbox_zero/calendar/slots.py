"""Alternative time slots for a proposed event, and their scores.

All clock arithmetic (hours, weekdays, "same day") is done in the event's
time zone, so 9 AM means 9 AM for the person being scheduled.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from inbox_zero.calendar.models import TimeContext, TimeSlot
from inbox_zero.errors import InvalidRequestError

SAME_DAY_HOURS = range(9, 17)
HOUR_OFFSETS = range(-3, 4)
BUSINESS_DAYS_AHEAD = 5
EARLIEST_START_HOUR = 8
LATEST_END_HOUR = 18


def resolve_time_zone(name: str | ZoneInfo) -> ZoneInfo:
    if isinstance(name, ZoneInfo):
        return name
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidRequestError(f"Invalid request: unknown time zone {name!r}") from e


def localize(dt: datetime, tz: ZoneInfo) -> datetime:
    """Express ``dt`` in ``tz``; naive datetimes are taken as wall time in ``tz``."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _ends_in_hours(end: datetime) -> bool:
    # Only the wall-clock hour counts, so a slot running past midnight
    # into the early morning is kept.
    return end.hour <= LATEST_END_HOUR


def _next_business_days(start: date, count: int) -> list[date]:
    days = []
    day = start
    while len(days) < count:
        day += timedelta(days=1)
        if day.weekday() < 5:
            days.append(day)
    return days


def generate_time_slots(
    original_start: datetime,
    original_end: datetime,
    time_zone: str | ZoneInfo,
) -> list[TimeSlot]:
    """Candidate slots with the same duration as the original event.

    Same day: every full hour from 9 to 16 that does not start inside the
    original event. Then, on each of the next five business days, the
    original start hour and up to three hours either side, starting no
    earlier than 8 AM. Every slot must end at an hour of 6 PM or earlier.
    """
    tz = resolve_time_zone(time_zone)
    start = localize(original_start, tz)
    end = localize(original_end, tz)
    duration = end - start

    slots: list[TimeSlot] = []

    for hour in SAME_DAY_HOURS:
        slot_start = start.replace(hour=hour, minute=0, second=0, microsecond=0)
        slot_end = slot_start + duration
        if _ends_in_hours(slot_end) and (slot_start < start or slot_start > end):
            slots.append(TimeSlot(slot_start, slot_end))

    for day in _next_business_days(start.date(), BUSINESS_DAYS_AHEAD):
        for offset in HOUR_OFFSETS:
            hour = start.hour + offset
            if not 0 <= hour <= 23:
                continue
            slot_start = datetime.combine(day, time(hour), tzinfo=tz)
            slot_end = slot_start + duration
            if hour >= EARLIEST_START_HOUR and _ends_in_hours(slot_end):
                slots.append(TimeSlot(slot_start, slot_end))

    return slots


def score_slot(slot: TimeSlot, original_start: datetime) -> int:
    """100, minus 20 per day and 5 per hour away from the original start."""
    original = localize(original_start, slot.start.tzinfo) if slot.start.tzinfo else original_start
    day_diff = abs((slot.start.date() - original.date()).days)
    hour_diff = abs(slot.start.hour - original.hour)
    return 100 - day_diff * 20 - hour_diff * 5


def determine_time_context(dt: datetime) -> TimeContext:
    hour = dt.hour
    is_weekend = dt.weekday() >= 5
    if hour < 12:
        time_of_day = "morning"
    elif hour < 17:
        time_of_day = "afternoon"
    else:
        time_of_day = "evening"
    return TimeContext(
        is_business_hours=not is_weekend and 9 <= hour < 17,
        day_type="weekend" if is_weekend else "weekday",
        time_of_day=time_of_day,
    )


def is_similar_time_context(a: datetime, b: datetime) -> bool:
    return determine_time_context(a).is_business_hours == determine_time_context(b).is_business_hours
