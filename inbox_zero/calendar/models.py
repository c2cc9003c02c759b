"""Calendar data models — request/response bodies and slot types.

API bodies use camelCase on the wire (``startTime``) and snake_case in
Python; ``populate_by_name`` lets tests and internal callers use either.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Slot generation ---


@dataclass
class TimeSlot:
    start: datetime
    end: datetime


@dataclass
class TimeContext:
    is_business_hours: bool
    day_type: Literal["weekday", "weekend"]
    time_of_day: Literal["morning", "afternoon", "evening"]


# --- LLM analysis ---


class CategoryGuess(CamelModel):
    primary: Literal["meeting", "sports", "meal", "coffee", "other"]
    confidence: float


class EventTiming(CamelModel):
    duration: float  # minutes
    flexibility: Literal["strict", "moderate", "flexible"]


class EventCategory(CamelModel):
    category: CategoryGuess
    timing: EventTiming


class SuggestedEvent(CamelModel):
    summary: str
    description: str
    start_time: str | None = None
    end_time: str | None = None
    time_zone: str
    attendees: list[str] | None = None


class AnalyzeCalendarResult(CamelModel):
    should_create_event: bool
    confidence: float
    event_category: EventCategory | None = None
    suggested_event: SuggestedEvent | None = None


class AnalyzeCalendarRequest(CamelModel):
    subject: str
    content: str


# --- Conflicts & proposals ---


class CheckConflictsRequest(CamelModel):
    start_time: datetime
    end_time: datetime
    time_zone: str


class ConflictEvent(CamelModel):
    id: str
    summary: str
    start_time: str
    end_time: str
    attendees: list[str] = Field(default_factory=list)


class ConflictCheckResult(CamelModel):
    has_conflicts: bool
    existing_events: list[ConflictEvent] = Field(default_factory=list)

    def to_api(self) -> dict:
        body: dict = {"hasConflicts": self.has_conflicts}
        if self.existing_events:
            body["conflicts"] = {
                "existingEvents": [e.to_api() for e in self.existing_events]
            }
        return body


class SuggestTimesRequest(CamelModel):
    start_time: datetime
    end_time: datetime
    time_zone: str
    attendees: list[str]
    event_category: EventCategory | None = None


class TimeProposal(CamelModel):
    start_time: str
    end_time: str
    attendee_availability: dict[str, bool] = Field(default_factory=dict)
    score: int


# --- Event creation ---


class EventCreatedRequest(CamelModel):
    thread_id: str
    message_id: str


class CreateEventRequest(CamelModel):
    summary: str
    description: str
    start_time: str
    end_time: str
    time_zone: str | None = None
    attendees: list[str] | None = None
    thread_id: str | None = None
    message_id: str | None = None


class UpdateEventRequest(CamelModel):
    summary: str | None = None
    description: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    time_zone: str | None = None
    attendees: list[str] | None = None


class CreatedEvent(CamelModel):
    summary: str
    description: str
    start_time: str
    end_time: str
    time_zone: str
    attendees: list[str]
    google_event_id: str
