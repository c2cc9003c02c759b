"""Reply-zero API — threads waiting on the user or on others."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from inbox_zero.api.deps import get_current_user
from inbox_zero.db.connection import RecordNotFoundError, get_db
from inbox_zero.db.models import ThreadTrackerRepository, User
from inbox_zero.errors import InboxZeroError
from inbox_zero.reply_tracker.inbound import ThreadTrackerType, list_trackers, resolve_tracker

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/reply-tracker")


@router.get("")
async def get_trackers(
    type: ThreadTrackerType | None = None,
    resolved: bool = False,
    page: int = Query(default=1, ge=1),
    user: User = Depends(get_current_user),
) -> dict:
    return list_trackers(
        ThreadTrackerRepository(get_db()), user.id, tracker_type=type, resolved=resolved, page=page
    )


@router.post("/{tracker_id}/resolve")
async def post_resolve_tracker(tracker_id: int, user: User = Depends(get_current_user)) -> dict:
    try:
        resolve_tracker(ThreadTrackerRepository(get_db()), user.id, tracker_id)
    except RecordNotFoundError as e:
        raise InboxZeroError("Tracker not found", 404) from e
    return {"success": True}
