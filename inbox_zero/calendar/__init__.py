"""Calendar features: event suggestions from email, conflicts, alternative times."""

from inbox_zero.calendar.client import CalendarService, UserCalendarClient
from inbox_zero.calendar.slots import generate_time_slots, score_slot

__all__ = ["CalendarService", "UserCalendarClient", "generate_time_slots", "score_slot"]
