"""Rules API — apply an executed rule's pending actions."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Request

from inbox_zero.api.deps import get_current_user, gmail_client_for
from inbox_zero.db.connection import get_db, is_not_found_error
from inbox_zero.db.models import ExecutedRuleRepository, RuleRepository, User
from inbox_zero.errors import InboxZeroError
from inbox_zero.rules.execute import execute_act

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/rules")


@router.post("/executed/{executed_rule_id}/apply")
async def apply_executed_rule(
    executed_rule_id: int, request: Request, user: User = Depends(get_current_user)
) -> dict:
    db = get_db()
    executed_rules = ExecutedRuleRepository(db)
    try:
        executed_rule = executed_rules.get(executed_rule_id)
    except Exception as e:
        if is_not_found_error(e):
            raise InboxZeroError("Executed rule not found", 404) from e
        raise
    if executed_rule.user_id != user.id:
        raise InboxZeroError("Executed rule not found", 404)

    rule = RuleRepository(db).get(executed_rule.rule_id) if executed_rule.rule_id else None
    is_reply_tracking_rule = bool(rule and rule["track_replies"])

    def run() -> None:
        client = gmail_client_for(request, user)
        email = client.get_message(executed_rule.message_id)
        if email is None:
            raise InboxZeroError("Failed to load message", 502)
        execute_act(db, client, executed_rule, email, user.email, is_reply_tracking_rule)

    await asyncio.to_thread(run)
    return {"success": True, "status": executed_rules.get(executed_rule_id).status}
