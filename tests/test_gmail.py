"""Tests for Gmail models, client operations and Inbox Zero labels."""

import base64
from datetime import datetime, timezone
from email import message_from_bytes
from unittest.mock import MagicMock

from inbox_zero.db.models import LabelRepository, UserRepository
from inbox_zero.gmail.client import UserGmailClient
from inbox_zero.gmail.labels import INBOX_ZERO_LABELS, get_or_create_inbox_zero_label
from inbox_zero.gmail.models import Message, WatchResponse, internal_date_to_datetime


def _decode_raw(raw: str):
    return message_from_bytes(base64.urlsafe_b64decode(raw))


class TestMessageParsing:
    def test_from_api_basic(self):
        data = {
            "id": "msg_1",
            "threadId": "thread_1",
            "snippet": "Hello there",
            "internalDate": "1700000000000",
            "labelIds": ["INBOX", "UNREAD"],
            "payload": {
                "headers": [
                    {"name": "From", "value": "Sender Name <sender@example.com>"},
                    {"name": "To", "value": "me@example.com"},
                    {"name": "Subject", "value": "Test Subject"},
                    {"name": "Message-ID", "value": "<abc@mail.example.com>"},
                ],
                "mimeType": "text/plain",
                "body": {"data": "SGVsbG8gV29ybGQ="},  # "Hello World"
            },
        }
        msg = Message.from_api(data)
        assert msg.id == "msg_1"
        assert msg.thread_id == "thread_1"
        assert msg.sender_email == "sender@example.com"
        assert msg.sender_name == "Sender Name"
        assert msg.subject == "Test Subject"
        assert msg.body == "Hello World"
        assert msg.rfc_message_id == "<abc@mail.example.com>"
        assert msg.received_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_multipart_body(self):
        data = {
            "id": "msg_2",
            "payload": {
                "mimeType": "multipart/alternative",
                "headers": [{"name": "From", "value": "plain@example.com"}],
                "parts": [
                    {"mimeType": "text/html", "body": {"data": "PGI-SGk8L2I-"}},
                    {"mimeType": "text/plain", "body": {"data": "SGk="}},
                ],
            },
        }
        msg = Message.from_api(data)
        assert msg.sender_email == "plain@example.com"
        assert msg.sender_name == ""
        assert msg.body == "Hi"

    def test_bad_internal_date_falls_back_to_now(self):
        before = datetime.now(timezone.utc)
        assert internal_date_to_datetime("garbage") >= before


class TestWatchResponse:
    def test_from_api(self):
        response = WatchResponse.from_api({"historyId": 12345, "expiration": "1700000000000"})
        assert response.history_id == "12345"
        assert response.expiration == "1700000000000"


class TestUserGmailClient:
    def _client(self):
        service = MagicMock()
        return UserGmailClient(service, "me@example.com"), service.users.return_value

    def test_archive_removes_inbox(self):
        client, gmail = self._client()
        client.archive_thread("thread_1")
        gmail.threads.return_value.modify.assert_called_once_with(
            userId="me", id="thread_1", body={"removeLabelIds": ["INBOX"]}
        )

    def test_mark_spam(self):
        client, gmail = self._client()
        client.mark_spam_thread("thread_1")
        gmail.threads.return_value.modify.assert_called_once_with(
            userId="me", id="thread_1", body={"addLabelIds": ["SPAM"], "removeLabelIds": ["INBOX"]}
        )

    def test_modify_without_changes_is_noop(self):
        client, gmail = self._client()
        client.modify_message_labels("msg_1")
        gmail.messages.return_value.modify.assert_not_called()

    def test_create_draft_replies_in_thread(self):
        client, gmail = self._client()
        gmail.drafts.return_value.create.return_value.execute.return_value = {"id": "draft_1"}

        draft_id = client.create_draft(
            "thread_1", "bob@example.com", "Lunch", "Sounds good", in_reply_to="<abc@mail>"
        )

        assert draft_id == "draft_1"
        body = gmail.drafts.return_value.create.call_args.kwargs["body"]
        assert body["message"]["threadId"] == "thread_1"
        mime = _decode_raw(body["message"]["raw"])
        assert mime["subject"] == "Re: Lunch"
        assert mime["to"] == "bob@example.com"
        assert mime["In-Reply-To"] == "<abc@mail>"

    def test_send_message(self):
        client, gmail = self._client()
        gmail.messages.return_value.send.return_value.execute.return_value = {"id": "sent_1"}

        assert client.send_message("bob@example.com", "Hi", "Body", cc="carol@example.com") == "sent_1"
        body = gmail.messages.return_value.send.call_args.kwargs["body"]
        assert "threadId" not in body
        assert _decode_raw(body["raw"])["cc"] == "carol@example.com"

    def test_get_or_create_label_existing(self):
        client, gmail = self._client()
        gmail.labels.return_value.list.return_value.execute.return_value = {
            "labels": [{"id": "Label_7", "name": "Work"}]
        }
        assert client.get_or_create_label("Work") == "Label_7"
        gmail.labels.return_value.create.assert_not_called()

    def test_get_or_create_label_creates(self):
        client, gmail = self._client()
        gmail.labels.return_value.list.return_value.execute.return_value = {"labels": []}
        gmail.labels.return_value.create.return_value.execute.return_value = {"id": "Label_8"}
        assert client.get_or_create_label("Work") == "Label_8"

    def test_watch_inbox(self):
        client, gmail = self._client()
        gmail.watch.return_value.execute.return_value = {"historyId": "1", "expiration": "99"}

        response = client.watch("projects/p/topics/t", label_ids=["INBOX"])

        assert response.expiration == "99"
        gmail.watch.assert_called_once_with(
            userId="me",
            body={
                "topicName": "projects/p/topics/t",
                "labelIds": ["INBOX"],
                "labelFilterBehavior": "INCLUDE",
            },
        )

    def test_get_message_failure_returns_none(self):
        client, gmail = self._client()
        gmail.messages.return_value.get.return_value.execute.side_effect = ValueError("boom")
        assert client.get_message("msg_1") is None


class TestInboxZeroLabels:
    def test_label_is_created_once_and_cached(self, db):
        user_id = UserRepository(db).create("test@example.com")
        labels = LabelRepository(db)
        client = MagicMock()
        client.get_or_create_label.return_value = "Label_1"

        assert get_or_create_inbox_zero_label(client, labels, user_id, "acted") == "Label_1"
        assert get_or_create_inbox_zero_label(client, labels, user_id, "acted") == "Label_1"

        client.get_or_create_label.assert_called_once_with(INBOX_ZERO_LABELS["acted"])
        assert labels.get_labels(user_id) == {"acted": "Label_1"}
