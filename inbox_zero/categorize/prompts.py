"""Sender categorization prompt templates for LLM gateway."""

from __future__ import annotations

from inbox_zero.db.models import Category

CATEGORIZE_SYSTEM_PROMPT = """You categorize email senders for an inbox management tool.
Assign every sender exactly ONE of the user's categories, judging from the sender address and domain.

Rules:
- Use a category name exactly as written in the list.
- If no category fits, or you cannot tell what the sender is, answer "Unknown".
- Include every sender from the input, once.

Respond with JSON only:
{"senders": [{"sender": "<email>", "category": "<category name>"}]}"""


def build_categorize_user_message(senders: list[str], categories: list[Category]) -> str:
    """Build the user message listing categories and the senders to place."""
    lines = ["Categories:"]
    for category in categories:
        if category.description:
            lines.append(f"- {category.name}: {category.description}")
        else:
            lines.append(f"- {category.name}")
    lines.append("")
    lines.append("Senders:")
    lines.extend(f"- {sender}" for sender in senders)
    return "\n".join(lines)
