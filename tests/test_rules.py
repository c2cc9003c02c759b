"""Tests for rule actions and executing a pending rule."""

from unittest.mock import MagicMock

import pytest

from inbox_zero.db.models import (
    ExecutedAction,
    ExecutedRule,
    ExecutedRuleRepository,
    ThreadTrackerRepository,
)
from inbox_zero.gmail.models import Message
from inbox_zero.rules.actions import run_action
from inbox_zero.rules.execute import execute_act


def _email():
    return Message(
        id="msg_1",
        thread_id="thread_1",
        sender_email="bob@example.com",
        sender_name="Bob",
        to="user@example.com",
        subject="Lunch",
        body="Lunch on Monday?",
        internal_date="1700000000000",
        rfc_message_id="<lunch@mail.example.com>",
    )


def _gmail_client():
    client = MagicMock()
    client.get_or_create_label.side_effect = lambda name: f"id:{name}"
    return client


def _rule(**overrides):
    fields = {"id": 1, "user_id": 1, "thread_id": "thread_1", "message_id": "msg_1"}
    fields.update(overrides)
    return ExecutedRule(**fields)


class TestRunAction:
    def test_label(self):
        client = _gmail_client()
        run_action(client, _email(), ExecutedAction(type="LABEL", label="Work"), _rule())
        client.modify_thread_labels.assert_called_once_with("thread_1", add=["id:Work"])

    def test_label_without_name_is_skipped(self):
        client = _gmail_client()
        run_action(client, _email(), ExecutedAction(type="LABEL"), _rule())
        client.modify_thread_labels.assert_not_called()

    def test_reply_in_thread(self):
        client = _gmail_client()
        run_action(client, _email(), ExecutedAction(type="REPLY", content="Sure!"), _rule())
        client.send_message.assert_called_once_with(
            "bob@example.com",
            "Re: Lunch",
            "Sure!",
            thread_id="thread_1",
            cc=None,
            bcc=None,
            in_reply_to="<lunch@mail.example.com>",
        )

    def test_draft(self):
        client = _gmail_client()
        run_action(client, _email(), ExecutedAction(type="DRAFT_EMAIL", content="Draft body"), _rule())
        client.create_draft.assert_called_once_with(
            "thread_1",
            to="bob@example.com",
            subject="Lunch",
            body="Draft body",
            in_reply_to="<lunch@mail.example.com>",
        )

    def test_forward_includes_original(self):
        client = _gmail_client()
        run_action(client, _email(), ExecutedAction(type="FORWARD", to_address="carol@example.com"), _rule())
        to, subject, body = client.send_message.call_args.args
        assert to == "carol@example.com"
        assert subject == "Fwd: Lunch"
        assert "From: Bob <bob@example.com>" in body
        assert "Lunch on Monday?" in body

    def test_send_without_recipient(self):
        with pytest.raises(ValueError):
            run_action(_gmail_client(), _email(), ExecutedAction(type="SEND_EMAIL"), _rule())

    def test_unknown_action(self):
        with pytest.raises(ValueError, match="Unknown action type"):
            run_action(_gmail_client(), _email(), ExecutedAction(type="TELEPORT"), _rule())


class TestExecuteAct:
    def _executed_rule(self, db, user, actions, status="PENDING"):
        repo = ExecutedRuleRepository(db)
        executed_id = repo.create(user.id, "thread_1", "msg_1", actions, status=status)
        return repo.get(executed_id)

    def test_applies_actions_and_labels_acted(self, db, user):
        client = _gmail_client()
        executed = self._executed_rule(
            db, user, [ExecutedAction(type="LABEL", label="Work"), ExecutedAction(type="ARCHIVE")]
        )

        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)

        client.archive_thread.assert_called_once_with("thread_1")
        assert [c.kwargs["add"] for c in client.modify_thread_labels.call_args_list] == [
            ["id:Work"],
            ["id:Inbox Zero/Acted"],
        ]
        assert ExecutedRuleRepository(db).get(executed.id).status == "APPLIED"

    def test_reply_tracking_rule(self, db, user):
        client = _gmail_client()
        trackers = ThreadTrackerRepository(db)
        trackers.upsert(user.id, "thread_1", "msg_0", "AWAITING", "2023-11-13T10:00:00+00:00")
        executed = self._executed_rule(db, user, [ExecutedAction(type="LABEL", label="To Reply")])

        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=True)

        client.get_or_create_label.assert_any_call("Inbox Zero/To Reply")
        assert "To Reply" not in [c.args[0] for c in client.get_or_create_label.call_args_list]
        client.modify_thread_labels.assert_any_call("thread_1", remove=["id:Inbox Zero/Awaiting Reply"])
        client.modify_message_labels.assert_called_once_with("msg_1", add=["id:Inbox Zero/To Reply"])

        rows = {r["message_id"]: r for r in trackers.get_by_thread(user.id, "thread_1")}
        assert rows["msg_0"]["resolved"] == 1
        assert rows["msg_1"]["type"] == "NEEDS_REPLY"
        assert rows["msg_1"]["sent_at"] == "2023-11-14T22:13:20+00:00"
        assert ExecutedRuleRepository(db).get(executed.id).status == "APPLIED"

    def test_not_pending_is_skipped(self, db, user):
        client = _gmail_client()
        executed = self._executed_rule(db, user, [ExecutedAction(type="ARCHIVE")], status="APPLIED")

        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)

        client.archive_thread.assert_not_called()
        client.modify_thread_labels.assert_not_called()

    def test_runs_only_once(self, db, user):
        client = _gmail_client()
        executed = self._executed_rule(db, user, [ExecutedAction(type="ARCHIVE")])

        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)
        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)

        client.archive_thread.assert_called_once()

    def test_failed_action_marks_error(self, db, user):
        client = _gmail_client()
        client.archive_thread.side_effect = RuntimeError("Gmail down")
        executed = self._executed_rule(db, user, [ExecutedAction(type="ARCHIVE")])

        with pytest.raises(RuntimeError, match="Gmail down"):
            execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)

        assert ExecutedRuleRepository(db).get(executed.id).status == "ERROR"

    def test_acted_label_failure_is_not_fatal(self, db, user):
        client = _gmail_client()
        client.get_or_create_label.side_effect = RuntimeError("label quota")
        executed = self._executed_rule(db, user, [ExecutedAction(type="MARK_READ")])

        execute_act(db, client, executed, _email(), user.email, is_reply_tracking_rule=False)

        client.mark_read_thread.assert_called_once_with("thread_1")
        assert ExecutedRuleRepository(db).get(executed.id).status == "APPLIED"
