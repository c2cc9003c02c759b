"""Calendar API routes — conflicts, alternative times, created events."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request

from inbox_zero.api.deps import calendar_client_for, get_current_user
from inbox_zero.calendar.conflicts import check_conflicts
from inbox_zero.calendar.events import create_calendar_event, get_event_created, update_calendar_event
from inbox_zero.calendar.models import (
    CheckConflictsRequest,
    CreateEventRequest,
    EventCreatedRequest,
    SuggestTimesRequest,
    UpdateEventRequest,
)
from inbox_zero.calendar.suggest import suggest_times
from inbox_zero.db.connection import get_db
from inbox_zero.db.models import CalendarEventRepository, User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/calendar")


@router.post("/check-conflicts")
async def post_check_conflicts(
    body: CheckConflictsRequest, request: Request, user: User = Depends(get_current_user)
) -> dict:
    logger.info(
        "Checking conflicts for %s: %s - %s (%s)",
        user.email,
        body.start_time.isoformat(),
        body.end_time.isoformat(),
        body.time_zone,
    )
    config = request.app.state.config

    def run():
        client = calendar_client_for(request, user)
        return check_conflicts(
            client,
            body.start_time,
            body.end_time,
            body.time_zone,
            window_hours=config.calendar.conflict_window_hours,
        )

    result = await asyncio.to_thread(run)
    logger.info("Conflict check for %s: %d conflicts", user.email, len(result.existing_events))
    return result.to_api()


@router.post("/suggest-times")
async def post_suggest_times(
    body: SuggestTimesRequest, request: Request, user: User = Depends(get_current_user)
) -> dict:
    config = request.app.state.config

    def run():
        client = calendar_client_for(request, user)
        return suggest_times(
            client,
            body.start_time,
            body.end_time,
            body.time_zone,
            body.attendees,
            event_category=body.event_category,
            max_proposals=config.calendar.max_proposals,
        )

    proposals = await asyncio.to_thread(run)
    return {"proposals": [p.to_api() for p in proposals]}


@router.post("/event-created")
async def post_event_created(body: EventCreatedRequest, user: User = Depends(get_current_user)) -> dict:
    events = CalendarEventRepository(get_db())
    return get_event_created(events, user.id, body.thread_id, body.message_id)


@router.post("/events")
async def post_create_event(
    body: CreateEventRequest, request: Request, user: User = Depends(get_current_user)
) -> dict:
    config = request.app.state.config

    def run():
        client = calendar_client_for(request, user)
        return create_calendar_event(
            client,
            CalendarEventRepository(get_db()),
            user,
            body,
            config.calendar.default_time_zone,
        )

    return await asyncio.to_thread(run)


@router.put("/events/{event_id}")
async def put_update_event(
    event_id: str,
    body: UpdateEventRequest,
    request: Request,
    user: User = Depends(get_current_user),
) -> dict:
    config = request.app.state.config

    def run():
        client = calendar_client_for(request, user)
        return update_calendar_event(
            client,
            CalendarEventRepository(get_db()),
            user,
            event_id,
            body,
            config.calendar.default_time_zone,
        )

    return await asyncio.to_thread(run)
