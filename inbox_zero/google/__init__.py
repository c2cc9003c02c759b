"""Shared Google API plumbing — credentials and request retry."""

from inbox_zero.google.auth import GoogleAuth
from inbox_zero.google.retry import execute_with_retry, http_status

__all__ = ["GoogleAuth", "execute_with_retry", "http_status"]
