"""Calendar analysis prompt templates for LLM gateway."""

ANALYZE_CALENDAR_SYSTEM_PROMPT = """You analyze emails and decide whether they should become calendar events.
Look for:
1. Meeting requests or scheduling discussions
2. Social activities or sports events
3. Meals or coffee meetings
4. Any other time-sensitive activity

Classify each event:
- Category: meeting, sports, meal, coffee, or other
- Flexibility: strict (must stay close to the proposed time), moderate, or flexible
- Duration: the typical length in minutes for this kind of event

Only suggest an event when the email has clear time-related content. When you do, extract:
- A clear, concise title (summary)
- Start and end times if mentioned, in ISO 8601 format with a UTC offset
- Attendee email addresses that are mentioned
- A short description with the relevant context from the email

Be conservative: suggest an event only when you are confident it is appropriate.

Respond with JSON only:
{
  "shouldCreateEvent": true,
  "confidence": 0.0,
  "eventCategory": {
    "category": {"primary": "meeting|sports|meal|coffee|other", "confidence": 0.0},
    "timing": {"duration": 60, "flexibility": "strict|moderate|flexible"}
  },
  "suggestedEvent": {
    "summary": "...",
    "description": "...",
    "startTime": "2024-01-01T10:00:00+00:00",
    "endTime": "2024-01-01T11:00:00+00:00",
    "timeZone": "...",
    "attendees": ["..."]
  }
}
Omit "eventCategory" and "suggestedEvent" when no event should be created."""


def build_analyze_calendar_user_message(
    subject: str,
    content: str,
    today: str,
    time_zone: str,
) -> str:
    """Build the user message for calendar analysis."""
    return "\n".join(
        [
            "Decide whether this email should become a calendar event.",
            "",
            f"Subject: {subject}",
            "",
            "Content:",
            content,
            "",
            f"Today's date is: {today}",
            f"Use the time zone {time_zone} in your answer.",
        ]
    )
