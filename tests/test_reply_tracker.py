"""Tests for reply tracking — needs-reply marking and the reply-zero listing."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from inbox_zero.db.connection import RecordNotFoundError
from inbox_zero.db.models import LabelRepository, ThreadTrackerRepository, UserRepository
from inbox_zero.reply_tracker.inbound import (
    ThreadTrackerType,
    list_trackers,
    mark_needs_reply,
    resolve_tracker,
)


class TestMarkNeedsReply:
    def test_uses_cached_labels(self, db, user):
        labels = LabelRepository(db)
        labels.set_label(user.id, "awaiting_reply", "Label_AW", "Inbox Zero/Awaiting Reply")
        labels.set_label(user.id, "needs_reply", "Label_NR", "Inbox Zero/To Reply")
        client = MagicMock()

        mark_needs_reply(db, client, user.id, "thread_1", "msg_1", datetime(2025, 3, 10, 9, tzinfo=timezone.utc))

        client.get_or_create_label.assert_not_called()
        client.modify_thread_labels.assert_called_once_with("thread_1", remove=["Label_AW"])
        client.modify_message_labels.assert_called_once_with("msg_1", add=["Label_NR"])
        rows = ThreadTrackerRepository(db).get_by_thread(user.id, "thread_1")
        assert [(r["type"], r["resolved"]) for r in rows] == [("NEEDS_REPLY", 0)]


class TestListTrackers:
    def _seed(self, db, user_id, count, tracker_type="NEEDS_REPLY"):
        repo = ThreadTrackerRepository(db)
        for i in range(count):
            repo.upsert(user_id, f"thread_{i}", f"msg_{i}", tracker_type, f"2025-03-10T{i:02d}:00:00+00:00")
        return repo

    def test_first_page_newest_first(self, db, user):
        repo = self._seed(db, user.id, 3)

        result = list_trackers(repo, user.id, ThreadTrackerType.NEEDS_REPLY)

        assert result["total"] == 3
        assert result["page"] == 1
        assert result["totalPages"] == 1
        assert [t["threadId"] for t in result["trackers"]] == ["thread_2", "thread_1", "thread_0"]
        assert result["trackers"][0]["resolved"] is False
        assert result["trackers"][0]["sentAt"] == "2025-03-10T02:00:00+00:00"

    def test_paging(self, db, user):
        repo = self._seed(db, user.id, 5)

        result = list_trackers(repo, user.id, page=3, page_size=2)

        assert result["totalPages"] == 3
        assert [t["threadId"] for t in result["trackers"]] == ["thread_0"]

    def test_filters_by_type_and_user(self, db, user):
        repo = self._seed(db, user.id, 2, tracker_type="AWAITING")
        other = UserRepository(db).create("other@example.com")
        self._seed(db, other, 4)

        assert list_trackers(repo, user.id, ThreadTrackerType.NEEDS_REPLY)["total"] == 0
        assert list_trackers(repo, user.id, ThreadTrackerType.AWAITING)["total"] == 2

    def test_empty(self, db, user):
        result = list_trackers(ThreadTrackerRepository(db), user.id)
        assert result == {"trackers": [], "page": 1, "totalPages": 0, "total": 0}


class TestResolveTracker:
    def test_resolves(self, db, user):
        repo = ThreadTrackerRepository(db)
        tracker_id = repo.upsert(user.id, "thread_1", "msg_1", "NEEDS_REPLY", "2025-03-10T09:00:00+00:00")

        resolve_tracker(repo, user.id, tracker_id)

        assert list_trackers(repo, user.id, resolved=True)["total"] == 1
        assert list_trackers(repo, user.id)["total"] == 0

    def test_missing(self, db, user):
        with pytest.raises(RecordNotFoundError):
            resolve_tracker(ThreadTrackerRepository(db), user.id, 999)
