"""Analyze API — does an email describe a calendar event?"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request

from inbox_zero.api.deps import get_current_user
from inbox_zero.calendar.models import AnalyzeCalendarRequest
from inbox_zero.db.models import User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/analyze")


@router.post("/calendar")
async def analyze_calendar(
    body: AnalyzeCalendarRequest, request: Request, user: User = Depends(get_current_user)
) -> dict:
    analyzer = request.app.state.calendar_analyzer
    result = await asyncio.to_thread(analyzer.analyze, body.subject, body.content, user)
    return result.to_api()
