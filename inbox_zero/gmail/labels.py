"""Inbox Zero's own Gmail labels, created on first use and cached per user."""

from __future__ import annotations

import logging

from inbox_zero.db.models import LabelRepository
from inbox_zero.gmail.client import UserGmailClient

logger = logging.getLogger(__name__)

INBOX_ZERO_LABELS = {
    "acted": "Inbox Zero/Acted",
    "needs_reply": "Inbox Zero/To Reply",
    "awaiting_reply": "Inbox Zero/Awaiting Reply",
    "cold_email": "Inbox Zero/Cold Email",
}


def get_or_create_inbox_zero_label(
    client: UserGmailClient,
    labels: LabelRepository,
    user_id: int,
    key: str,
) -> str:
    """Gmail label ID for one of :data:`INBOX_ZERO_LABELS`.

    The ID is cached in ``user_labels`` so Gmail is asked at most once per
    user and key.
    """
    cached = labels.get_labels(user_id).get(key)
    if cached:
        return cached

    name = INBOX_ZERO_LABELS[key]
    label_id = client.get_or_create_label(name)
    labels.set_label(user_id, key, label_id, name)
    logger.debug("Cached label %s (%s) for user %d", key, label_id, user_id)
    return label_id
