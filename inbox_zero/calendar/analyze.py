"""Calendar analysis — should this email become an event?"""

from __future__ import annotations

import logging
from datetime import datetime

import sentry_sdk

from inbox_zero.calendar.models import AnalyzeCalendarResult
from inbox_zero.calendar.prompts import (
    ANALYZE_CALENDAR_SYSTEM_PROMPT,
    build_analyze_calendar_user_message,
)
from inbox_zero.calendar.slots import resolve_time_zone
from inbox_zero.db.models import User
from inbox_zero.errors import CalendarAnalysisError, InvalidRequestError
from inbox_zero.llm.gateway import LLMGateway, parse_json_response

logger = logging.getLogger(__name__)


class CalendarAnalyzer:
    """Asks the LLM whether an email describes an event worth scheduling."""

    def __init__(self, llm_gateway: LLMGateway, default_time_zone: str = "UTC"):
        self.llm = llm_gateway
        self.default_time_zone = default_time_zone

    def _time_zone_for(self, user: User) -> str:
        if user.time_zone:
            try:
                return resolve_time_zone(user.time_zone).key
            except InvalidRequestError:
                logger.warning("User %d has unknown time zone %s", user.id, user.time_zone)
        return self.default_time_zone

    def analyze(self, subject: str, content: str, user: User) -> AnalyzeCalendarResult:
        time_zone = self._time_zone_for(user)
        today = datetime.now(resolve_time_zone(time_zone)).strftime("%m/%d/%Y")

        try:
            response = self.llm.complete(
                "analyze_calendar",
                ANALYZE_CALENDAR_SYSTEM_PROMPT,
                build_analyze_calendar_user_message(subject, content, today, time_zone),
                model=self.llm.config.calendar_model,
                max_tokens=self.llm.config.max_calendar_tokens,
                user_id=user.id,
                api_key=user.ai_api_key,
            )
            if not response:
                raise ValueError("No response object returned from AI")
            result = AnalyzeCalendarResult.model_validate(parse_json_response(response))
        except Exception as e:
            logger.error(
                "AI calendar analysis failed for %s (subject %r, %d chars): %s",
                user.email,
                subject,
                len(content),
                e,
            )
            with sentry_sdk.new_scope() as scope:
                scope.set_extra("subject", subject)
                scope.set_extra("content_length", len(content))
                scope.set_extra("user_email", user.email)
                sentry_sdk.capture_exception(e)
            raise CalendarAnalysisError(f"Failed to analyze calendar event: {e}") from e

        if result.suggested_event:
            result.suggested_event.time_zone = time_zone

        logger.info(
            "Calendar analysis for %s: create=%s confidence=%.2f",
            user.email,
            result.should_create_event,
            result.confidence,
        )
        return result
