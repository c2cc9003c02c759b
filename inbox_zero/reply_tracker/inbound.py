"""Reply tracking for inbound mail — threads where the user owes a reply."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any

from inbox_zero.db.connection import Database, RecordNotFoundError
from inbox_zero.db.models import LabelRepository, ThreadTrackerRepository
from inbox_zero.gmail.client import UserGmailClient
from inbox_zero.gmail.labels import get_or_create_inbox_zero_label

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class ThreadTrackerType(str, Enum):
    NEEDS_REPLY = "NEEDS_REPLY"
    AWAITING = "AWAITING"
    NEEDS_ACTION = "NEEDS_ACTION"


def mark_needs_reply(
    db: Database,
    client: UserGmailClient,
    user_id: int,
    thread_id: str,
    message_id: str,
    sent_at: datetime,
) -> None:
    """The latest message in the thread is to the user: they owe the reply now.

    Any "awaiting reply" state for the thread is resolved and its label
    removed, then the message is tracked and labelled as needing a reply.
    """
    trackers = ThreadTrackerRepository(db)
    labels = LabelRepository(db)

    resolved = trackers.resolve_thread(user_id, thread_id, ThreadTrackerType.AWAITING.value)
    awaiting_label = get_or_create_inbox_zero_label(client, labels, user_id, "awaiting_reply")
    client.modify_thread_labels(thread_id, remove=[awaiting_label])

    trackers.upsert(
        user_id, thread_id, message_id, ThreadTrackerType.NEEDS_REPLY.value, sent_at.isoformat()
    )
    needs_reply_label = get_or_create_inbox_zero_label(client, labels, user_id, "needs_reply")
    client.modify_message_labels(message_id, add=[needs_reply_label])

    logger.info(
        "Thread %s needs reply (resolved %d awaiting trackers)", thread_id, resolved
    )


def list_trackers(
    trackers: ThreadTrackerRepository,
    user_id: int,
    tracker_type: ThreadTrackerType | None = None,
    resolved: bool = False,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> dict[str, Any]:
    """One page of the reply-zero view, newest first."""
    page = max(page, 1)
    type_value = tracker_type.value if tracker_type else None
    total = trackers.count(user_id, type_value, resolved)
    rows = trackers.get_page(user_id, type_value, resolved, page_size, (page - 1) * page_size)
    return {
        "trackers": [
            {
                "id": r["id"],
                "threadId": r["thread_id"],
                "messageId": r["message_id"],
                "type": r["type"],
                "resolved": bool(r["resolved"]),
                "sentAt": r["sent_at"],
            }
            for r in rows
        ],
        "page": page,
        "totalPages": math.ceil(total / page_size) if total else 0,
        "total": total,
    }


def resolve_tracker(trackers: ThreadTrackerRepository, user_id: int, tracker_id: int) -> None:
    if not trackers.resolve(user_id, tracker_id):
        raise RecordNotFoundError(f"Tracker {tracker_id} not found")
    logger.info("Resolved tracker %d for user %d", tracker_id, user_id)
