"""Gmail data models — Message, WatchResponse."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parseaddr


def _decode_part(data: str) -> str:
    return base64.urlsafe_b64decode(data).decode("utf-8", errors="replace")


def _find_text_body(payload: dict) -> str:
    """Depth-first search for the first non-empty text/plain part."""
    if payload.get("mimeType") == "text/plain":
        data = payload.get("body", {}).get("data", "")
        if data:
            return _decode_part(data)
    for part in payload.get("parts", []):
        text = _find_text_body(part)
        if text:
            return text
    return ""


def internal_date_to_datetime(internal_date: str | int | None) -> datetime:
    """Convert Gmail's epoch-millis ``internalDate`` to an aware UTC datetime.

    Missing or malformed values fall back to the current time.
    """
    try:
        millis = int(internal_date)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


@dataclass
class Message:
    id: str
    thread_id: str
    sender_email: str = ""
    sender_name: str = ""
    to: str = ""
    cc: str = ""
    subject: str = ""
    snippet: str = ""
    body: str = ""
    internal_date: str = ""
    rfc_message_id: str = ""
    label_ids: list[str] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> Message:
        """Parse a Gmail API message resource."""
        payload = data.get("payload", {})
        headers = {h["name"]: h["value"] for h in payload.get("headers", [])}
        lowered = {k.lower(): v for k, v in headers.items()}
        sender_name, sender_email = parseaddr(lowered.get("from", ""))

        return cls(
            id=data["id"],
            thread_id=data.get("threadId", ""),
            sender_email=sender_email,
            sender_name=sender_name,
            to=lowered.get("to", ""),
            cc=lowered.get("cc", ""),
            subject=lowered.get("subject", ""),
            snippet=data.get("snippet", ""),
            body=_find_text_body(payload),
            internal_date=data.get("internalDate", ""),
            rfc_message_id=lowered.get("message-id", ""),
            label_ids=data.get("labelIds", []),
            headers=headers,
        )

    @property
    def received_at(self) -> datetime:
        return internal_date_to_datetime(self.internal_date)


@dataclass
class WatchResponse:
    history_id: str
    expiration: str

    @classmethod
    def from_api(cls, data: dict) -> WatchResponse:
        return cls(
            history_id=str(data.get("historyId", "")),
            expiration=str(data.get("expiration", "")),
        )
