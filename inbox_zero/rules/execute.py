"""Executing a matched rule — apply its actions once, then record the outcome."""

from __future__ import annotations

import logging

from inbox_zero.db.connection import Database
from inbox_zero.db.models import ExecutedRule, ExecutedRuleRepository, LabelRepository
from inbox_zero.gmail.client import UserGmailClient
from inbox_zero.gmail.labels import get_or_create_inbox_zero_label
from inbox_zero.gmail.models import Message
from inbox_zero.reply_tracker.inbound import mark_needs_reply
from inbox_zero.rules.actions import run_action

logger = logging.getLogger(__name__)

PENDING = "PENDING"
APPLYING = "APPLYING"
APPLIED = "APPLIED"
ERROR = "ERROR"


def execute_act(
    db: Database,
    client: UserGmailClient,
    executed_rule: ExecutedRule,
    email: Message,
    user_email: str,
    is_reply_tracking_rule: bool,
) -> None:
    """Run the actions of a pending executed rule.

    The PENDING -> APPLYING move is a conditional update, so concurrent
    callers apply the actions at most once. A failing action marks the rule
    ERROR and propagates. Reply tracking, the APPLIED status and the "acted"
    label are best effort: their failures are logged only.
    """
    executed_rules = ExecutedRuleRepository(db)
    context = f"rule={executed_rule.rule_id} executed={executed_rule.id} thread={executed_rule.thread_id}"

    if not executed_rules.transition(executed_rule.id, PENDING, APPLYING):
        logger.info("Executed rule is not pending or does not exist (%s)", context)
        return

    for action in executed_rule.action_items:
        # reply-tracking rules get their label from mark_needs_reply below
        if is_reply_tracking_rule and action.type == "LABEL":
            continue
        try:
            run_action(client, email, action, executed_rule)
        except Exception:
            logger.error("Action %s failed for %s (%s)", action.type, user_email, context)
            executed_rules.set_status(executed_rule.id, ERROR)
            raise

    if is_reply_tracking_rule:
        try:
            mark_needs_reply(
                db,
                client,
                executed_rule.user_id,
                executed_rule.thread_id,
                executed_rule.message_id,
                email.received_at,
            )
        except Exception as e:
            logger.error("Failed to create reply tracker (%s): %s", context, e)

    try:
        executed_rules.set_status(executed_rule.id, APPLIED)
    except Exception as e:
        logger.error("Failed to update executed rule (%s): %s", context, e)

    try:
        acted = get_or_create_inbox_zero_label(
            client, LabelRepository(db), executed_rule.user_id, "acted"
        )
        client.modify_thread_labels(executed_rule.thread_id, add=[acted])
    except Exception as e:
        logger.error("Failed to label acted (%s): %s", context, e)

    logger.info("Applied %d actions for %s (%s)", len(executed_rule.action_items), user_email, context)
