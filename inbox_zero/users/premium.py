"""Premium feature access checks."""

from __future__ import annotations

from enum import Enum


class FeatureAccess(str, Enum):
    UNLOCKED = "UNLOCKED"
    UNLOCKED_WITH_API_KEY = "UNLOCKED_WITH_API_KEY"
    LOCKED = "LOCKED"


def _has_access(access: str | FeatureAccess | None, api_key: str | None) -> bool:
    if access == FeatureAccess.UNLOCKED:
        return True
    return access == FeatureAccess.UNLOCKED_WITH_API_KEY and bool(api_key)


def has_ai_access(ai_automation_access: str | FeatureAccess | None, api_key: str | None) -> bool:
    """AI automation is usable with an unlocked plan, or a key-only plan plus the user's key."""
    return _has_access(ai_automation_access, api_key)


def has_cold_email_access(
    cold_email_blocker_access: str | FeatureAccess | None, api_key: str | None
) -> bool:
    return _has_access(cold_email_blocker_access, api_key)
