"""Cron request authentication — shared secret in a query param or header."""

from __future__ import annotations

import logging

from fastapi import Request

from inbox_zero.middleware import secret_matches

logger = logging.getLogger(__name__)

CRON_SECRET_PARAM = "cron_secret"
CRON_SECRET_HEADER = "x-cron-secret"


def has_cron_secret(request: Request, expected: str) -> bool:
    """GET cron calls pass the secret as ``?cron_secret=``."""
    provided = request.query_params.get(CRON_SECRET_PARAM)
    ok = secret_matches(provided, expected)
    logger.debug("Cron secret in query: present=%s valid=%s", provided is not None, ok)
    return ok


def has_post_cron_secret(request: Request, expected: str) -> bool:
    """POST cron calls pass the secret in the ``x-cron-secret`` header."""
    provided = request.headers.get(CRON_SECRET_HEADER)
    ok = secret_matches(provided, expected)
    logger.debug("Cron secret in header: present=%s valid=%s", provided is not None, ok)
    return ok


def cron_secret_header(secret: str) -> dict[str, str] | None:
    """Headers for calling our own cron endpoints, or None when no secret is set."""
    if not secret:
        return None
    return {CRON_SECRET_HEADER: secret}
