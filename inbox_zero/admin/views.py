"""Admin views — SQLAdmin ModelView classes for each table."""

from __future__ import annotations

from sqladmin import ModelView

from inbox_zero.admin.models import (
    CalendarEventModel,
    ExecutedActionModel,
    ExecutedRuleModel,
    LLMCallModel,
    NewsletterModel,
    PremiumModel,
    ThreadTrackerModel,
    UserModel,
)


class UserAdmin(ModelView, model=UserModel):
    """User admin view."""

    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"

    # Read-only
    can_create = False
    can_edit = False
    can_delete = False

    column_list = [
        "id",
        "email",
        "display_name",
        "is_active",
        "premium_id",
        "watch_emails_expiration",
        "created_at",
    ]
    column_searchable_list = ["email", "display_name"]
    column_sortable_list = ["id", "email", "created_at"]
    column_default_sort = ("id", True)


class PremiumAdmin(ModelView, model=PremiumModel):
    name = "Premium"
    name_plural = "Premiums"
    icon = "fa-solid fa-star"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = ["id", "tier", "renews_at", "ai_automation_access", "cold_email_blocker_access"]
    column_sortable_list = ["id", "renews_at"]


class CalendarEventAdmin(ModelView, model=CalendarEventModel):
    """Events created from emails."""

    name = "Calendar Event"
    name_plural = "Calendar Events"
    icon = "fa-solid fa-calendar"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = [
        "id",
        "user_id",
        "summary",
        "start_time",
        "end_time",
        "time_zone",
        "google_event_id",
        "created_at",
    ]
    column_searchable_list = ["summary", "thread_id", "google_event_id"]
    column_sortable_list = ["id", "user_id", "start_time", "created_at"]
    column_default_sort = ("created_at", True)


class NewsletterAdmin(ModelView, model=NewsletterModel):
    name = "Sender"
    name_plural = "Senders"
    icon = "fa-solid fa-newspaper"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = ["id", "user_id", "email", "status", "category_id", "updated_at"]
    column_searchable_list = ["email"]
    column_sortable_list = ["id", "user_id", "status", "updated_at"]


class ExecutedRuleAdmin(ModelView, model=ExecutedRuleModel):
    """Rule executions — debugging automation outcomes."""

    name = "Executed Rule"
    name_plural = "Executed Rules"
    icon = "fa-solid fa-bolt"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = ["id", "user_id", "rule_id", "thread_id", "status", "reason", "created_at"]
    column_searchable_list = ["thread_id", "status"]
    column_sortable_list = ["id", "user_id", "status", "created_at"]
    column_default_sort = ("created_at", True)


class ExecutedActionAdmin(ModelView, model=ExecutedActionModel):
    name = "Executed Action"
    name_plural = "Executed Actions"
    icon = "fa-solid fa-list-check"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = ["id", "executed_rule_id", "type", "label", "to_address", "subject"]
    column_sortable_list = ["id", "executed_rule_id", "type"]


class ThreadTrackerAdmin(ModelView, model=ThreadTrackerModel):
    name = "Thread Tracker"
    name_plural = "Thread Trackers"
    icon = "fa-solid fa-reply"

    can_create = False
    can_edit = False
    can_delete = False

    column_list = ["id", "user_id", "thread_id", "type", "resolved", "sent_at"]
    column_searchable_list = ["thread_id", "type"]
    column_sortable_list = ["id", "user_id", "type", "sent_at"]
    column_default_sort = ("sent_at", True)


class LLMCallAdmin(ModelView, model=LLMCallModel):
    """LLM call admin view — debugging LLM decisions."""

    name = "LLM Call"
    name_plural = "LLM Calls"
    icon = "fa-solid fa-brain"

    can_create = False
    can_edit = False
    can_delete = False

    # List view: show type, model, tokens, latency
    column_list = [
        "id",
        "user_id",
        "call_type",
        "model",
        "total_tokens",
        "latency_ms",
        "error",
        "created_at",
    ]
    column_searchable_list = ["call_type", "model"]
    column_sortable_list = ["id", "user_id", "call_type", "total_tokens", "latency_ms", "created_at"]
    column_default_sort = ("created_at", True)

    # Detail view: show full prompts and response
    column_details_list = [
        "id",
        "user_id",
        "call_type",
        "model",
        "system_prompt",
        "user_message",
        "response_text",
        "prompt_tokens",
        "completion_tokens",
        "total_tokens",
        "latency_ms",
        "error",
        "created_at",
    ]
