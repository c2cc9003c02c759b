"""Tests for WatchManager — Gmail push notification renewal."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from inbox_zero.db.models import PremiumRepository, UserRepository
from inbox_zero.gmail.models import WatchResponse
from inbox_zero.sync.watch import WatchManager, expiration_to_datetime

TOPIC = "projects/test/topics/gmail-push"


def _millis(delta: timedelta) -> str:
    return str(int((datetime.now(timezone.utc) + delta).timestamp() * 1000))


class TestExpiration:
    def test_epoch_millis(self):
        assert expiration_to_datetime("1700000000000") == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_missing_or_garbage(self):
        assert expiration_to_datetime(None) is None
        assert expiration_to_datetime("") is None
        assert expiration_to_datetime("soon") is None


class TestRenewWatch:
    def _make_manager(self, topic: str = TOPIC) -> WatchManager:
        return WatchManager(MagicMock(), MagicMock(), topic)

    def test_watches_inbox_and_stores_expiration(self):
        manager = self._make_manager()
        manager.users = MagicMock()
        client = manager.gmail_service.for_user.return_value
        client.watch.return_value = WatchResponse(history_id="123", expiration="9999999999")

        assert manager.renew_watch(1, "user@example.com")

        manager.gmail_service.for_user.assert_called_once_with("user@example.com")
        client.watch.assert_called_once_with(TOPIC, label_ids=["INBOX"])
        manager.users.set_watch_expiration.assert_called_once_with(1, "9999999999")

    def test_no_topic_configured(self):
        manager = self._make_manager(topic="")
        assert not manager.renew_watch(1, "user@example.com")
        manager.gmail_service.for_user.assert_not_called()


class TestWatchAllEmails:
    def _setup_users(self, db):
        premiums = PremiumRepository(db)
        users = UserRepository(db)
        renews = datetime.now(timezone.utc) + timedelta(days=30)

        ai = users.create("ai@example.com", premium_id=premiums.create(renews_at=renews, ai_automation_access="UNLOCKED"))
        users.set_watch_expiration(ai, _millis(timedelta(days=2)))

        locked = users.create(
            "locked@example.com",
            premium_id=premiums.create(renews_at=renews, ai_automation_access="UNLOCKED_WITH_API_KEY"),
        )
        users.set_watch_expiration(locked, _millis(timedelta(days=-1)))

        users.create(
            "cold@example.com",
            premium_id=premiums.create(renews_at=renews, cold_email_blocker_access="UNLOCKED_WITH_API_KEY"),
            ai_api_key="sk-user",
        )
        users.create(
            "lapsed@example.com",
            premium_id=premiums.create(renews_at=renews - timedelta(days=60), ai_automation_access="UNLOCKED"),
        )
        return users

    def test_outcomes_per_user(self, db):
        users = self._setup_users(db)
        gmail_service = MagicMock()
        gmail_service.for_user.return_value.watch.return_value = WatchResponse(
            history_id="1", expiration="1800000000000"
        )

        results = WatchManager(db, gmail_service, TOPIC).watch_all_emails()

        assert results == {
            "cold@example.com": "watched",
            "ai@example.com": "watched",
            "locked@example.com": "no_access",
        }
        # never-watched users go first
        called = [c.args[0] for c in gmail_service.for_user.call_args_list]
        assert called == ["cold@example.com", "ai@example.com"]
        assert users.get_by_email("locked@example.com").watch_emails_expiration is None
        assert users.get_by_email("ai@example.com").watch_emails_expiration == "1800000000000"

    def test_one_failure_does_not_stop_the_rest(self, db):
        self._setup_users(db)
        gmail_service = MagicMock()
        good_client = MagicMock()
        good_client.watch.return_value = WatchResponse(history_id="1", expiration="1800000000000")
        gmail_service.for_user.side_effect = [RuntimeError("delegation denied"), good_client]

        results = WatchManager(db, gmail_service, TOPIC).watch_all_emails()

        assert results["cold@example.com"] == "error"
        assert results["ai@example.com"] == "watched"

    def test_without_topic_nothing_is_watched(self, db):
        self._setup_users(db)
        results = WatchManager(db, MagicMock(), "").watch_all_emails()
        assert results["ai@example.com"] == "not_watched"
