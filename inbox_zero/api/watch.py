"""Watch API routes — cron-triggered renewal of Gmail push notifications."""

from __future__ import annotations

import asyncio
import logging

import sentry_sdk
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from inbox_zero.api.exception_handlers import error_response
from inbox_zero.cron import has_cron_secret, has_post_cron_secret
from inbox_zero.db.connection import get_db
from inbox_zero.sync.watch import WatchManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/google")


def _unauthorized(method: str) -> JSONResponse:
    logger.error("Unauthorized %s cron request to /api/google/watch/all", method)
    sentry_sdk.capture_message("Unauthorized cron request: api/google/watch/all", level="error")
    return error_response("Unauthorized", 401)


async def _watch_all(request: Request) -> dict:
    config = request.app.state.config
    manager = WatchManager(get_db(), request.app.state.gmail_service, config.sync.pubsub_topic)
    results = await asyncio.to_thread(manager.watch_all_emails)
    logger.info(
        "Watch renewal finished: %d users, %d watched",
        len(results),
        sum(1 for outcome in results.values() if outcome == "watched"),
    )
    return {"success": True}


@router.get("/watch/all")
async def watch_all_get(request: Request):
    if not has_cron_secret(request, request.app.state.config.server.cron_secret):
        return _unauthorized("GET")
    return await _watch_all(request)


@router.post("/watch/all")
async def watch_all_post(request: Request):
    if not has_post_cron_secret(request, request.app.state.config.server.cron_secret):
        return _unauthorized("POST")
    return await _watch_all(request)
