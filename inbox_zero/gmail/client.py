"""Gmail API client — per-user wrapper over the discovery client."""

from __future__ import annotations

import base64
import logging
from email.mime.text import MIMEText
from typing import Any

from googleapiclient.discovery import build

from inbox_zero.config import AppConfig
from inbox_zero.gmail.models import Message, WatchResponse
from inbox_zero.google.auth import GoogleAuth
from inbox_zero.google.retry import execute_with_retry

logger = logging.getLogger(__name__)

INBOX = "INBOX"
UNREAD = "UNREAD"
SPAM = "SPAM"


class GmailService:
    """Top-level Gmail service — creates per-user clients."""

    def __init__(self, config: AppConfig):
        self.auth = GoogleAuth(config)
        self.config = config

    def for_user(self, user_email: str | None = None) -> UserGmailClient:
        """Create a Gmail client acting as ``user_email`` (or the OAuth user)."""
        creds = self.auth.get_credentials(user_email)
        service = build("gmail", "v1", credentials=creds, cache_discovery=False)
        return UserGmailClient(service, user_email or "me")


class UserGmailClient:
    """Gmail operations for a single user.

    Reads return ``None`` on failure; mutations raise so callers can record
    the failure against whatever they were doing.
    """

    def __init__(self, service: Any, user_email: str):
        self.service = service
        self.user_email = user_email
        self._gmail = service.users()

    def _exec(self, request: Any, operation: str = "API call") -> Any:
        return execute_with_retry(request, operation=operation)

    def get_message(self, message_id: str, format: str = "full") -> Message | None:
        try:
            data = self._exec(
                self._gmail.messages().get(userId="me", id=message_id, format=format),
                operation=f"messages.get({message_id})",
            )
            return Message.from_api(data)
        except Exception as e:
            logger.error("Failed to get message %s: %s", message_id, e)
            return None

    def modify_thread_labels(
        self,
        thread_id: str,
        add: list[str] | None = None,
        remove: list[str] | None = None,
    ) -> None:
        """Add/remove labels on every message of a thread."""
        body: dict[str, Any] = {}
        if add:
            body["addLabelIds"] = add
        if remove:
            body["removeLabelIds"] = remove
        if not body:
            return
        self._exec(
            self._gmail.threads().modify(userId="me", id=thread_id, body=body),
            operation=f"threads.modify({thread_id})",
        )

    def modify_message_labels(
        self,
        message_id: str,
        add: list[str] | None = None,
        remove: list[str] | None = None,
    ) -> None:
        body: dict[str, Any] = {}
        if add:
            body["addLabelIds"] = add
        if remove:
            body["removeLabelIds"] = remove
        if not body:
            return
        self._exec(
            self._gmail.messages().modify(userId="me", id=message_id, body=body),
            operation=f"messages.modify({message_id})",
        )

    def archive_thread(self, thread_id: str) -> None:
        self.modify_thread_labels(thread_id, remove=[INBOX])

    def mark_read_thread(self, thread_id: str) -> None:
        self.modify_thread_labels(thread_id, remove=[UNREAD])

    def mark_spam_thread(self, thread_id: str) -> None:
        self.modify_thread_labels(thread_id, add=[SPAM], remove=[INBOX])

    @staticmethod
    def _build_raw(
        to: str,
        subject: str,
        body: str,
        *,
        sender: str,
        cc: str | None = None,
        bcc: str | None = None,
        in_reply_to: str | None = None,
    ) -> str:
        message = MIMEText(body)
        message["from"] = sender
        message["to"] = to
        message["subject"] = subject
        if cc:
            message["cc"] = cc
        if bcc:
            message["bcc"] = bcc
        if in_reply_to:
            message["In-Reply-To"] = in_reply_to
            message["References"] = in_reply_to
        return base64.urlsafe_b64encode(message.as_bytes()).decode("utf-8")

    def create_draft(
        self,
        thread_id: str,
        to: str,
        subject: str,
        body: str,
        in_reply_to: str | None = None,
    ) -> str:
        """Create a draft in a thread. Returns the draft ID."""
        raw = self._build_raw(
            to, _reply_subject(subject), body, sender=self.user_email, in_reply_to=in_reply_to
        )
        result = self._exec(
            self._gmail.drafts().create(
                userId="me", body={"message": {"raw": raw, "threadId": thread_id}}
            ),
            operation="drafts.create",
        )
        return result.get("id", "")

    def send_message(
        self,
        to: str,
        subject: str,
        body: str,
        *,
        thread_id: str | None = None,
        cc: str | None = None,
        bcc: str | None = None,
        in_reply_to: str | None = None,
    ) -> str:
        """Send an email (optionally inside a thread). Returns the message ID."""
        raw = self._build_raw(
            to, subject, body, sender=self.user_email, cc=cc, bcc=bcc, in_reply_to=in_reply_to
        )
        message: dict[str, Any] = {"raw": raw}
        if thread_id:
            message["threadId"] = thread_id
        result = self._exec(
            self._gmail.messages().send(userId="me", body=message),
            operation="messages.send",
        )
        return result.get("id", "")

    def get_or_create_label(self, name: str) -> str:
        """Get existing label by name or create it. Returns label ID."""
        results = self._exec(self._gmail.labels().list(userId="me"), operation="labels.list")
        for label in results.get("labels", []):
            if label["name"] == name:
                return label["id"]

        body = {
            "name": name,
            "labelListVisibility": "labelShow",
            "messageListVisibility": "show",
        }
        result = self._exec(
            self._gmail.labels().create(userId="me", body=body),
            operation=f"labels.create({name})",
        )
        logger.info("Created label: %s → %s", name, result["id"])
        return result["id"]

    def watch(self, topic_name: str, label_ids: list[str] | None = None) -> WatchResponse:
        """Set up Gmail push notifications via Pub/Sub."""
        body: dict[str, Any] = {"topicName": topic_name}
        if label_ids:
            body["labelIds"] = label_ids
            body["labelFilterBehavior"] = "INCLUDE"
        result = self._exec(self._gmail.watch(userId="me", body=body), operation="watch")
        return WatchResponse.from_api(result)


def _reply_subject(subject: str) -> str:
    return subject if subject.lower().startswith("re:") else f"Re: {subject}"
