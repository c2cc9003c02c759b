"""Database model helpers — query builders for the Inbox Zero schema."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from inbox_zero.db.connection import Database, RecordNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Premium:
    id: int
    tier: str | None = None
    renews_at: str | None = None
    ai_automation_access: str = "LOCKED"
    cold_email_blocker_access: str = "LOCKED"

    @property
    def is_active(self) -> bool:
        """True while the subscription renewal date is in the future."""
        if not self.renews_at:
            return False
        renews_at = datetime.fromisoformat(self.renews_at)
        if renews_at.tzinfo is None:
            renews_at = renews_at.replace(tzinfo=timezone.utc)
        return renews_at > datetime.now(timezone.utc)


@dataclass
class User:
    id: int
    email: str
    display_name: str | None = None
    is_active: bool = True
    premium_id: int | None = None
    ai_api_key: str | None = None
    time_zone: str | None = None
    watch_emails_expiration: str | None = None
    created_at: str | None = None
    premium: Premium | None = None


@dataclass
class Category:
    id: int
    user_id: int
    name: str
    description: str | None = None


@dataclass
class ExecutedAction:
    type: str
    id: int | None = None
    executed_rule_id: int | None = None
    label: str | None = None
    subject: str | None = None
    content: str | None = None
    to_address: str | None = None
    cc: str | None = None
    bcc: str | None = None


@dataclass
class ExecutedRule:
    id: int
    user_id: int
    thread_id: str
    message_id: str
    rule_id: int | None = None
    status: str = "PENDING"
    reason: str | None = None
    action_items: list[ExecutedAction] = field(default_factory=list)


_USER_COLUMNS = (
    "id",
    "email",
    "display_name",
    "is_active",
    "premium_id",
    "ai_api_key",
    "time_zone",
    "watch_emails_expiration",
    "created_at",
)

_USER_SELECT = """
    SELECT u.*, p.tier AS p_tier, p.renews_at AS p_renews_at,
           p.ai_automation_access AS p_ai_automation_access,
           p.cold_email_blocker_access AS p_cold_email_blocker_access
    FROM users u
    LEFT JOIN premiums p ON p.id = u.premium_id
"""


def _row_to_user(row: dict[str, Any]) -> User:
    user = User(**{k: row[k] for k in _USER_COLUMNS})
    user.is_active = bool(user.is_active)
    if row.get("premium_id") is not None:
        user.premium = Premium(
            id=row["premium_id"],
            tier=row["p_tier"],
            renews_at=row["p_renews_at"],
            ai_automation_access=row["p_ai_automation_access"],
            cold_email_blocker_access=row["p_cold_email_blocker_access"],
        )
    return user


class PremiumRepository:
    """Database operations for premium subscriptions."""

    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        tier: str | None = None,
        renews_at: datetime | None = None,
        ai_automation_access: str = "LOCKED",
        cold_email_blocker_access: str = "LOCKED",
    ) -> int:
        return self.db.execute_write(
            """INSERT INTO premiums (tier, renews_at, ai_automation_access, cold_email_blocker_access)
               VALUES (?, ?, ?, ?)""",
            (
                tier,
                renews_at.isoformat() if renews_at else None,
                ai_automation_access,
                cold_email_blocker_access,
            ),
        )


class UserRepository:
    """Database operations for users."""

    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        email: str,
        display_name: str | None = None,
        premium_id: int | None = None,
        ai_api_key: str | None = None,
        time_zone: str | None = None,
    ) -> int:
        return self.db.execute_write(
            """INSERT INTO users (email, display_name, premium_id, ai_api_key, time_zone)
               VALUES (?, ?, ?, ?, ?)""",
            (email, display_name, premium_id, ai_api_key, time_zone),
        )

    def get_by_email(self, email: str) -> User | None:
        row = self.db.execute_one(f"{_USER_SELECT} WHERE u.email = ?", (email,))
        return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> User | None:
        row = self.db.execute_one(f"{_USER_SELECT} WHERE u.id = ?", (user_id,))
        return _row_to_user(row) if row else None

    def get_premium_users(self) -> list[User]:
        """Active users whose premium subscription has not lapsed."""
        rows = self.db.execute(
            f"{_USER_SELECT} WHERE u.is_active = 1 AND u.premium_id IS NOT NULL ORDER BY u.id"
        )
        users = [_row_to_user(r) for r in rows]
        return [u for u in users if u.premium and u.premium.is_active]

    def set_watch_expiration(self, user_id: int, expiration: str | None) -> None:
        self.db.execute_write(
            "UPDATE users SET watch_emails_expiration = ? WHERE id = ?",
            (expiration, user_id),
        )


class LabelRepository:
    """Database operations for user label mappings."""

    def __init__(self, db: Database):
        self.db = db

    def set_label(
        self, user_id: int, label_key: str, gmail_label_id: str, gmail_label_name: str
    ) -> None:
        self.db.execute_write(
            """INSERT OR REPLACE INTO user_labels (user_id, label_key, gmail_label_id, gmail_label_name)
               VALUES (?, ?, ?, ?)""",
            (user_id, label_key, gmail_label_id, gmail_label_name),
        )

    def get_labels(self, user_id: int) -> dict[str, str]:
        """Return {label_key: gmail_label_id} mapping."""
        rows = self.db.execute(
            "SELECT label_key, gmail_label_id FROM user_labels WHERE user_id = ?",
            (user_id,),
        )
        return {r["label_key"]: r["gmail_label_id"] for r in rows}


class CalendarEventRepository:
    """Calendar events created from emails, one row per (user, thread, message)."""

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        user_id: int,
        thread_id: str,
        message_id: str,
        *,
        summary: str,
        description: str,
        start_time: str,
        end_time: str,
        time_zone: str,
        attendees: list[str],
        google_event_id: str,
    ) -> int:
        return self.db.execute_write(
            """INSERT INTO calendar_events_created (
                user_id, thread_id, message_id, summary, description,
                start_time, end_time, time_zone, attendees, google_event_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, thread_id, message_id) DO UPDATE SET
                summary = excluded.summary,
                description = excluded.description,
                start_time = excluded.start_time,
                end_time = excluded.end_time,
                time_zone = excluded.time_zone,
                attendees = excluded.attendees,
                google_event_id = excluded.google_event_id""",
            (
                user_id,
                thread_id,
                message_id,
                summary,
                description,
                start_time,
                end_time,
                time_zone,
                json.dumps(attendees),
                google_event_id,
            ),
        )

    def find(self, user_id: int, thread_id: str, message_id: str) -> dict[str, Any] | None:
        row = self.db.execute_one(
            """SELECT * FROM calendar_events_created
               WHERE user_id = ? AND thread_id = ? AND message_id = ?""",
            (user_id, thread_id, message_id),
        )
        return self._decode(row) if row else None

    def get_by_google_event_id(self, user_id: int, google_event_id: str) -> dict[str, Any] | None:
        row = self.db.execute_one(
            "SELECT * FROM calendar_events_created WHERE user_id = ? AND google_event_id = ?",
            (user_id, google_event_id),
        )
        return self._decode(row) if row else None

    def update_details(self, user_id: int, google_event_id: str, **fields: Any) -> int:
        """Update tracked event fields; returns number of rows touched."""
        if not fields:
            return 0
        if "attendees" in fields:
            fields["attendees"] = json.dumps(fields["attendees"] or [])
        sets = ", ".join(f"{k} = ?" for k in fields)
        params = (*fields.values(), user_id, google_event_id)
        return self.db.execute_update(
            f"UPDATE calendar_events_created SET {sets} WHERE user_id = ? AND google_event_id = ?",
            params,
        )

    @staticmethod
    def _decode(row: dict[str, Any]) -> dict[str, Any]:
        try:
            row["attendees"] = json.loads(row["attendees"]) if row["attendees"] else []
        except (TypeError, json.JSONDecodeError):
            logger.warning("Unreadable attendees for calendar event %s", row.get("id"))
            row["attendees"] = None
        return row


class CategoryRepository:
    """Sender categories defined per user."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, user_id: int, name: str, description: str | None = None) -> int:
        return self.db.execute_write(
            "INSERT INTO categories (user_id, name, description) VALUES (?, ?, ?)",
            (user_id, name, description),
        )

    def get_all(self, user_id: int) -> list[Category]:
        rows = self.db.execute(
            "SELECT id, user_id, name, description FROM categories WHERE user_id = ? ORDER BY id",
            (user_id,),
        )
        return [Category(**r) for r in rows]

    def ensure_defaults(self, user_id: int, defaults: list[dict[str, str]]) -> list[Category]:
        """Seed default categories when the user has none, then return all."""
        existing = self.get_all(user_id)
        if existing:
            return existing
        for item in defaults:
            self.db.execute_write(
                "INSERT OR IGNORE INTO categories (user_id, name, description) VALUES (?, ?, ?)",
                (user_id, item["name"], item.get("description")),
            )
        logger.info("Seeded %d default categories for user %d", len(defaults), user_id)
        return self.get_all(user_id)


class NewsletterRepository:
    """Known senders per user, with unsubscribe status and category."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, user_id: int, email: str) -> dict[str, Any] | None:
        return self.db.execute_one(
            "SELECT * FROM newsletters WHERE user_id = ? AND email = ?",
            (user_id, email),
        )

    def set_category(self, user_id: int, email: str, category_id: int | None) -> None:
        self.db.execute_write(
            """INSERT INTO newsletters (user_id, email, category_id)
               VALUES (?, ?, ?)
               ON CONFLICT(user_id, email) DO UPDATE SET
                   category_id = excluded.category_id,
                   updated_at = CURRENT_TIMESTAMP""",
            (user_id, email, category_id),
        )

    def set_status(self, user_id: int, email: str, status: str | None) -> None:
        self.db.execute_write(
            """INSERT INTO newsletters (user_id, email, status)
               VALUES (?, ?, ?)
               ON CONFLICT(user_id, email) DO UPDATE SET
                   status = excluded.status,
                   updated_at = CURRENT_TIMESTAMP""",
            (user_id, email, status),
        )

    def count_by_status(self, user_id: int) -> dict[str, int]:
        rows = self.db.execute(
            """SELECT status, COUNT(*) AS count FROM newsletters
               WHERE user_id = ? AND status IS NOT NULL
               GROUP BY status""",
            (user_id,),
        )
        return {r["status"]: r["count"] for r in rows}


class RuleRepository:
    """Automation rules."""

    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        user_id: int,
        name: str,
        instructions: str = "",
        track_replies: bool = False,
    ) -> int:
        return self.db.execute_write(
            """INSERT INTO rules (user_id, name, instructions, track_replies)
               VALUES (?, ?, ?, ?)""",
            (user_id, name, instructions, int(track_replies)),
        )

    def get(self, rule_id: int) -> dict[str, Any] | None:
        return self.db.execute_one("SELECT * FROM rules WHERE id = ?", (rule_id,))


class ExecutedRuleRepository:
    """Rule executions and the actions they carry."""

    def __init__(self, db: Database):
        self.db = db

    def create(
        self,
        user_id: int,
        thread_id: str,
        message_id: str,
        actions: list[ExecutedAction],
        rule_id: int | None = None,
        status: str = "PENDING",
        reason: str | None = None,
    ) -> int:
        executed_rule_id = self.db.execute_write(
            """INSERT INTO executed_rules (user_id, rule_id, thread_id, message_id, status, reason)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (user_id, rule_id, thread_id, message_id, status, reason),
        )
        for action in actions:
            self.db.execute_write(
                """INSERT INTO executed_actions (
                    executed_rule_id, type, label, subject, content, to_address, cc, bcc
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    executed_rule_id,
                    action.type,
                    action.label,
                    action.subject,
                    action.content,
                    action.to_address,
                    action.cc,
                    action.bcc,
                ),
            )
        return executed_rule_id

    def get(self, executed_rule_id: int) -> ExecutedRule:
        row = self.db.execute_one(
            "SELECT * FROM executed_rules WHERE id = ?", (executed_rule_id,)
        )
        if not row:
            raise RecordNotFoundError(f"Executed rule {executed_rule_id} not found")

        actions = self.db.execute(
            "SELECT * FROM executed_actions WHERE executed_rule_id = ? ORDER BY id",
            (executed_rule_id,),
        )
        return ExecutedRule(
            id=row["id"],
            user_id=row["user_id"],
            rule_id=row["rule_id"],
            thread_id=row["thread_id"],
            message_id=row["message_id"],
            status=row["status"],
            reason=row["reason"],
            action_items=[ExecutedAction(**a) for a in actions],
        )

    def transition(self, executed_rule_id: int, from_status: str, to_status: str) -> int:
        """Move a rule between statuses only if it is in ``from_status``.

        Returns the number of rows moved (0 or 1).
        """
        return self.db.execute_update(
            """UPDATE executed_rules SET status = ?, updated_at = CURRENT_TIMESTAMP
               WHERE id = ? AND status = ?""",
            (to_status, executed_rule_id, from_status),
        )

    def set_status(self, executed_rule_id: int, status: str) -> None:
        updated = self.db.execute_update(
            """UPDATE executed_rules SET status = ?, updated_at = CURRENT_TIMESTAMP
               WHERE id = ?""",
            (status, executed_rule_id),
        )
        if not updated:
            raise RecordNotFoundError(f"Executed rule {executed_rule_id} not found")


class ThreadTrackerRepository:
    """Reply-tracking state per thread message."""

    def __init__(self, db: Database):
        self.db = db

    def upsert(
        self, user_id: int, thread_id: str, message_id: str, tracker_type: str, sent_at: str
    ) -> int:
        return self.db.execute_write(
            """INSERT INTO thread_trackers (user_id, thread_id, message_id, type, sent_at)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(user_id, thread_id, message_id) DO UPDATE SET
                   type = excluded.type,
                   sent_at = excluded.sent_at,
                   resolved = 0,
                   updated_at = CURRENT_TIMESTAMP""",
            (user_id, thread_id, message_id, tracker_type, sent_at),
        )

    def resolve_thread(self, user_id: int, thread_id: str, tracker_type: str) -> int:
        """Resolve every open tracker of ``tracker_type`` in a thread."""
        return self.db.execute_update(
            """UPDATE thread_trackers SET resolved = 1, updated_at = CURRENT_TIMESTAMP
               WHERE user_id = ? AND thread_id = ? AND type = ? AND resolved = 0""",
            (user_id, thread_id, tracker_type),
        )

    def resolve(self, user_id: int, tracker_id: int) -> int:
        return self.db.execute_update(
            """UPDATE thread_trackers SET resolved = 1, updated_at = CURRENT_TIMESTAMP
               WHERE user_id = ? AND id = ?""",
            (user_id, tracker_id),
        )

    def get_by_thread(self, user_id: int, thread_id: str) -> list[dict[str, Any]]:
        return self.db.execute(
            "SELECT * FROM thread_trackers WHERE user_id = ? AND thread_id = ? ORDER BY id",
            (user_id, thread_id),
        )

    def get_page(
        self,
        user_id: int,
        tracker_type: str | None,
        resolved: bool,
        limit: int,
        offset: int,
    ) -> list[dict[str, Any]]:
        type_filter = "AND type = ?" if tracker_type else ""
        params: list[Any] = [user_id, int(resolved)]
        if tracker_type:
            params.append(tracker_type)
        params.extend([limit, offset])
        return self.db.execute(
            f"""SELECT * FROM thread_trackers
                WHERE user_id = ? AND resolved = ? {type_filter}
                ORDER BY sent_at DESC, id DESC
                LIMIT ? OFFSET ?""",
            tuple(params),
        )

    def count(self, user_id: int, tracker_type: str | None, resolved: bool) -> int:
        type_filter = "AND type = ?" if tracker_type else ""
        params: list[Any] = [user_id, int(resolved)]
        if tracker_type:
            params.append(tracker_type)
        row = self.db.execute_one(
            f"""SELECT COUNT(*) AS cnt FROM thread_trackers
                WHERE user_id = ? AND resolved = ? {type_filter}""",
            tuple(params),
        )
        return row["cnt"] if row else 0


class LLMCallRepository:
    """Database operations for LLM call logging."""

    def __init__(self, db: Database):
        self.db = db

    def log(
        self,
        call_type: str,
        model: str,
        user_id: int | None = None,
        system_prompt: str | None = None,
        user_message: str | None = None,
        response_text: str | None = None,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
        total_tokens: int = 0,
        latency_ms: int = 0,
        error: str | None = None,
    ) -> int:
        """Log an LLM API call with all metadata."""
        return self.db.execute_write(
            """INSERT INTO llm_calls (
                user_id, call_type, model, system_prompt, user_message, response_text,
                prompt_tokens, completion_tokens, total_tokens, latency_ms, error
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_id,
                call_type,
                model,
                system_prompt,
                user_message,
                response_text,
                prompt_tokens,
                completion_tokens,
                total_tokens,
                latency_ms,
                error,
            ),
        )
