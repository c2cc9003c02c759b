"""Sender categorization API — batches posted by the internal queue."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from inbox_zero.api.exception_handlers import error_response
from inbox_zero.db.connection import get_db
from inbox_zero.db.models import UserRepository
from inbox_zero.errors import UserNotFoundError
from inbox_zero.middleware import secret_matches

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/user/categorize")

API_KEY_HEADER = "x-api-key"


class CategorizeBatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    senders: list[str]


def is_valid_internal_api_key(request: Request, expected: str) -> bool:
    return secret_matches(request.headers.get(API_KEY_HEADER), expected)


async def _handle_batch(body: CategorizeBatchRequest, request: Request) -> dict:
    user = UserRepository(get_db()).get_by_id(body.user_id)
    if not user:
        raise UserNotFoundError()

    engine = request.app.state.categorization_engine
    results = await asyncio.to_thread(engine.categorize_senders, user, body.senders)
    return {
        "ok": True,
        "results": [{"sender": r.sender, "category": r.category} for r in results],
    }


@router.post("/senders/batch")
async def categorize_senders_batch(body: CategorizeBatchRequest, request: Request):
    if not is_valid_internal_api_key(request, request.app.state.config.server.internal_api_key):
        logger.warning("Invalid API key on categorize batch")
        return error_response("Invalid API key", 401)
    return await _handle_batch(body, request)


@router.post("/senders/batch/simple")
async def categorize_senders_batch_simple(body: CategorizeBatchRequest, request: Request):
    """Direct fallback used when batches are not delivered through the queue."""
    config = request.app.state.config
    if config.server.queue_token:
        return error_response("Queue is configured. This endpoint is disabled.", 403)
    if not is_valid_internal_api_key(request, config.server.internal_api_key):
        logger.warning("Invalid API key on simple categorize batch")
        return error_response("Invalid API key", 401)
    return await _handle_batch(body, request)
