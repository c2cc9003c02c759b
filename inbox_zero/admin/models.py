"""SQLAlchemy models for admin UI — read-only view wrappers over existing tables."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class PremiumModel(Base):
    __tablename__ = "premiums"

    id = Column(Integer, primary_key=True)
    tier = Column(String)
    renews_at = Column(String)
    ai_automation_access = Column(String)
    cold_email_blocker_access = Column(String)
    created_at = Column(DateTime)

    users = relationship("UserModel", back_populates="premium")


class UserModel(Base):
    """User model for admin UI."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    display_name = Column(String)
    is_active = Column(Integer, default=1)
    premium_id = Column(Integer, ForeignKey("premiums.id"))
    time_zone = Column(String)
    # Gmail watch expiry, epoch milliseconds as text
    watch_emails_expiration = Column(String)
    created_at = Column(DateTime)

    premium = relationship("PremiumModel", back_populates="users")
    calendar_events = relationship("CalendarEventModel", back_populates="user")
    trackers = relationship("ThreadTrackerModel", back_populates="user")


class CalendarEventModel(Base):
    __tablename__ = "calendar_events_created"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    thread_id = Column(String, nullable=False)
    message_id = Column(String, nullable=False)
    summary = Column(String)
    description = Column(Text)
    start_time = Column(String)
    end_time = Column(String)
    time_zone = Column(String)
    attendees = Column(Text)
    google_event_id = Column(String)
    created_at = Column(DateTime)

    user = relationship("UserModel", back_populates="calendar_events")


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)
    created_at = Column(DateTime)


class NewsletterModel(Base):
    """Known senders with unsubscribe status and category."""

    __tablename__ = "newsletters"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    email = Column(String, nullable=False)
    status = Column(String)
    category_id = Column(Integer, ForeignKey("categories.id"))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    category = relationship("CategoryModel")


class ExecutedRuleModel(Base):
    __tablename__ = "executed_rules"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rule_id = Column(Integer)
    thread_id = Column(String, nullable=False)
    message_id = Column(String, nullable=False)
    status = Column(String, nullable=False)
    reason = Column(Text)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    actions = relationship("ExecutedActionModel", back_populates="executed_rule")


class ExecutedActionModel(Base):
    __tablename__ = "executed_actions"

    id = Column(Integer, primary_key=True)
    executed_rule_id = Column(Integer, ForeignKey("executed_rules.id"), nullable=False)
    type = Column(String, nullable=False)
    label = Column(String)
    subject = Column(String)
    content = Column(Text)
    to_address = Column(String)
    cc = Column(String)
    bcc = Column(String)

    executed_rule = relationship("ExecutedRuleModel", back_populates="actions")


class ThreadTrackerModel(Base):
    __tablename__ = "thread_trackers"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    thread_id = Column(String, nullable=False)
    message_id = Column(String, nullable=False)
    type = Column(String, nullable=False)
    resolved = Column(Integer, default=0)
    sent_at = Column(String)
    created_at = Column(DateTime)

    user = relationship("UserModel", back_populates="trackers")


class LLMCallModel(Base):
    """LLM call log for admin UI."""

    __tablename__ = "llm_calls"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"))
    call_type = Column(String, nullable=False)
    model = Column(String, nullable=False)
    system_prompt = Column(Text)
    user_message = Column(Text)
    response_text = Column(Text)
    prompt_tokens = Column(Integer)
    completion_tokens = Column(Integer)
    total_tokens = Column(Integer)
    latency_ms = Column(Integer)
    error = Column(Text)
    created_at = Column(DateTime)
