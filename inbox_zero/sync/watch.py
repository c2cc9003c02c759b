"""Watch renewal — keeps Gmail push notifications active for premium users."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from inbox_zero.db.connection import Database
from inbox_zero.db.models import User, UserRepository
from inbox_zero.gmail.client import INBOX, GmailService
from inbox_zero.users.premium import has_ai_access, has_cold_email_access

logger = logging.getLogger(__name__)


def expiration_to_datetime(expiration: str | None) -> datetime | None:
    """Gmail watch expirations are epoch milliseconds, stored as strings."""
    if not expiration:
        return None
    try:
        return datetime.fromtimestamp(int(expiration) / 1000, tz=timezone.utc)
    except (TypeError, ValueError):
        logger.warning("Unreadable watch expiration %r", expiration)
        return None


def _watch_order(user: User) -> tuple[int, float]:
    """Never-watched users first, then the soonest expiration."""
    expires = expiration_to_datetime(user.watch_emails_expiration)
    if expires is None:
        return (0, 0.0)
    return (1, expires.timestamp())


class WatchManager:
    """Manages Gmail watch() subscriptions for push notifications."""

    def __init__(self, db: Database, gmail_service: GmailService, pubsub_topic: str):
        self.db = db
        self.users = UserRepository(db)
        self.gmail_service = gmail_service
        self.pubsub_topic = pubsub_topic

    def renew_watch(self, user_id: int, user_email: str) -> bool:
        """Renew watch() on the user's inbox and store the new expiration."""
        if not self.pubsub_topic:
            logger.warning("No Pub/Sub topic configured, skipping watch for %s", user_email)
            return False

        client = self.gmail_service.for_user(user_email)
        response = client.watch(self.pubsub_topic, label_ids=[INBOX])
        self.users.set_watch_expiration(user_id, response.expiration or None)
        logger.info("Watch renewed for %s (expires %s)", user_email, response.expiration)
        return True

    def watch_all_emails(self) -> dict[str, str]:
        """Renew watches for every premium user. Returns ``{email: outcome}``.

        Outcomes are ``watched``, ``no_access``, ``not_watched`` or ``error``;
        one user's failure never stops the loop.
        """
        users = sorted(self.users.get_premium_users(), key=_watch_order)
        logger.info(
            "Processing %d premium users (%d with a watch expiration)",
            len(users),
            sum(1 for u in users if u.watch_emails_expiration),
        )

        results: dict[str, str] = {}
        now = datetime.now(timezone.utc)
        for user in users:
            try:
                premium = user.premium
                ai_access = has_ai_access(premium.ai_automation_access, user.ai_api_key)
                cold_email_access = has_cold_email_access(
                    premium.cold_email_blocker_access, user.ai_api_key
                )

                if not ai_access and not cold_email_access:
                    logger.info(
                        "User %s does not have required access (ai=%s, cold_email=%s, api_key=%s)",
                        user.email,
                        premium.ai_automation_access,
                        premium.cold_email_blocker_access,
                        bool(user.ai_api_key),
                    )
                    expires = expiration_to_datetime(user.watch_emails_expiration)
                    if expires and expires < now:
                        logger.info("Clearing expired watch date for %s", user.email)
                        self.users.set_watch_expiration(user.id, None)
                    results[user.email] = "no_access"
                    continue

                watched = self.renew_watch(user.id, user.email)
                results[user.email] = "watched" if watched else "not_watched"
            except Exception as e:
                logger.error("Error processing user %d (%s): %s", user.id, user.email, e)
                results[user.email] = "error"

        return results
