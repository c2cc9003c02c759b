"""Gmail API integration — per-user client, message models, Inbox Zero labels."""

from inbox_zero.gmail.client import GmailService, UserGmailClient
from inbox_zero.gmail.models import Message, WatchResponse

__all__ = [
    "GmailService",
    "UserGmailClient",
    "Message",
    "WatchResponse",
]
