"""Inbox statistics helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from inbox_zero.db.models import NewsletterRepository


def get_newsletter_summary(newsletters: NewsletterRepository, user_id: int) -> dict[str, Any]:
    """Sender counts per newsletter status; senders without a status are left out."""
    return {"result": newsletters.count_by_status(user_id)}


def _epoch_ms(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def get_date_range_params(
    from_date: datetime | None = None, to_date: datetime | None = None
) -> dict[str, int]:
    """Query params for a stats date range, as epoch milliseconds."""
    params: dict[str, int] = {}
    if from_date:
        params["fromDate"] = _epoch_ms(from_date)
    if to_date:
        params["toDate"] = _epoch_ms(to_date)
    return params
