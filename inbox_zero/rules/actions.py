"""Rule actions — one Gmail operation per executed action."""

from __future__ import annotations

import logging
from collections.abc import Callable

from inbox_zero.db.models import ExecutedAction, ExecutedRule
from inbox_zero.gmail.client import UserGmailClient
from inbox_zero.gmail.models import Message

logger = logging.getLogger(__name__)

ActionHandler = Callable[[UserGmailClient, Message, ExecutedAction, ExecutedRule], None]


def _label(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    if not action.label:
        logger.warning("LABEL action %s has no label, skipping", action.id)
        return
    label_id = client.get_or_create_label(action.label)
    client.modify_thread_labels(rule.thread_id, add=[label_id])


def _archive(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    client.archive_thread(rule.thread_id)


def _mark_read(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    client.mark_read_thread(rule.thread_id)


def _mark_spam(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    client.mark_spam_thread(rule.thread_id)


def _draft(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    client.create_draft(
        rule.thread_id,
        to=action.to_address or email.sender_email,
        subject=action.subject or email.subject,
        body=action.content or "",
        in_reply_to=email.rfc_message_id,
    )


def _reply(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    subject = email.subject if email.subject.lower().startswith("re:") else f"Re: {email.subject}"
    client.send_message(
        action.to_address or email.sender_email,
        subject,
        action.content or "",
        thread_id=rule.thread_id,
        cc=action.cc,
        bcc=action.bcc,
        in_reply_to=email.rfc_message_id,
    )


def _send(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    if not action.to_address:
        raise ValueError(f"SEND_EMAIL action {action.id} has no recipient")
    client.send_message(
        action.to_address,
        action.subject or "",
        action.content or "",
        cc=action.cc,
        bcc=action.bcc,
    )


def _forward(client: UserGmailClient, email: Message, action: ExecutedAction, rule: ExecutedRule) -> None:
    if not action.to_address:
        raise ValueError(f"FORWARD action {action.id} has no recipient")
    forwarded = "\n".join(
        [
            action.content or "",
            "",
            "---------- Forwarded message ---------",
            f"From: {email.sender_name} <{email.sender_email}>" if email.sender_name else f"From: {email.sender_email}",
            f"Subject: {email.subject}",
            f"To: {email.to}",
            "",
            email.body or email.snippet,
        ]
    )
    client.send_message(
        action.to_address,
        f"Fwd: {email.subject}",
        forwarded,
        cc=action.cc,
        bcc=action.bcc,
    )


ACTION_HANDLERS: dict[str, ActionHandler] = {
    "LABEL": _label,
    "ARCHIVE": _archive,
    "MARK_READ": _mark_read,
    "MARK_SPAM": _mark_spam,
    "DRAFT_EMAIL": _draft,
    "REPLY": _reply,
    "SEND_EMAIL": _send,
    "FORWARD": _forward,
}


def run_action(
    client: UserGmailClient,
    email: Message,
    action: ExecutedAction,
    executed_rule: ExecutedRule,
) -> None:
    handler = ACTION_HANDLERS.get(action.type)
    if handler is None:
        raise ValueError(f"Unknown action type: {action.type}")
    logger.debug("Running %s on thread %s", action.type, executed_rule.thread_id)
    handler(client, email, action, executed_rule)
