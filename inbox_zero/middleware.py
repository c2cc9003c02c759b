"""HTTP middleware — Basic Auth for admin/API routes.

Uses pure ASGI middleware (not BaseHTTPMiddleware) to avoid
known issues with response streaming in Starlette.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

# Paths with their own authentication (cron secret, internal API key) or none
_PUBLIC_PREFIXES = ("/admin/statics/", "/api/user/categorize/senders/batch")
_PUBLIC_EXACT = ("/api/health", "/api/google/watch/all")


def secret_matches(provided: str | None, expected: str) -> bool:
    """Constant-time check of a shared secret; an unset secret never matches."""
    if not expected or not provided:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


def is_public_path(path: str) -> bool:
    return path in _PUBLIC_EXACT or any(path.startswith(p) for p in _PUBLIC_PREFIXES)


class BasicAuthMiddleware:
    """Require HTTP Basic Auth on all routes except public ones."""

    def __init__(self, app: ASGIApp, username: str, password: str) -> None:
        self.app = app
        self._username = username
        self._password = password

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or is_public_path(scope["path"]):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        auth = headers.get(b"authorization", b"").decode("utf-8", errors="ignore")

        if auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:], validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError):
                decoded = ""
            user, _, pwd = decoded.partition(":")
            if secrets.compare_digest(user.encode(), self._username.encode()) and secrets.compare_digest(
                pwd.encode(), self._password.encode()
            ):
                await self.app(scope, receive, send)
                return

        response = Response(
            status_code=401,
            headers={"WWW-Authenticate": 'Basic realm="Inbox Zero"'},
        )
        await response(scope, receive, send)
