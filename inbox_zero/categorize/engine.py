"""Sender categorization — the LLM files each sender under one of the user's categories."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from inbox_zero.categorize.prompts import CATEGORIZE_SYSTEM_PROMPT, build_categorize_user_message
from inbox_zero.db.models import Category, CategoryRepository, NewsletterRepository, User
from inbox_zero.errors import CategorizationError
from inbox_zero.llm.gateway import LLMGateway, parse_json_response

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"


@dataclass
class SenderCategory:
    sender: str
    category: str
    category_id: int | None = None


class CategorizationEngine:
    """Categorizes senders in batches and stores the result on each sender's newsletter row."""

    def __init__(
        self,
        llm_gateway: LLMGateway,
        categories: CategoryRepository,
        newsletters: NewsletterRepository,
        default_categories: list[dict[str, str]],
    ):
        self.llm = llm_gateway
        self.categories = categories
        self.newsletters = newsletters
        self.default_categories = default_categories

    def _ask_llm(self, user: User, senders: list[str], categories: list[Category]) -> dict[str, str]:
        """Raw ``{sender: category name}`` answers from the model."""
        try:
            response = self.llm.complete(
                "categorize_senders",
                CATEGORIZE_SYSTEM_PROMPT,
                build_categorize_user_message(senders, categories),
                model=self.llm.config.categorize_model,
                max_tokens=self.llm.config.max_categorize_tokens,
                user_id=user.id,
                api_key=user.ai_api_key,
            )
            data = parse_json_response(response)
        except Exception as e:
            logger.error("Sender categorization failed for %s: %s", user.email, e)
            raise CategorizationError(f"Failed to categorize senders: {e}") from e

        answers: dict[str, str] = {}
        items = data.get("senders", []) if isinstance(data, dict) else []
        for item in items:
            if isinstance(item, dict) and item.get("sender"):
                answers[str(item["sender"]).strip().lower()] = str(item.get("category") or "")
        return answers

    def categorize_senders(self, user: User, senders: list[str]) -> list[SenderCategory]:
        senders = list(dict.fromkeys(s.strip() for s in senders if s and s.strip()))
        categories = self.categories.ensure_defaults(user.id, self.default_categories)
        if not senders:
            return []

        by_name = {c.name.lower(): c for c in categories}
        answers = self._ask_llm(user, senders, categories)

        results = []
        for sender in senders:
            answer = answers.get(sender.lower(), "")
            category = by_name.get(answer.strip().lower())
            if category is None:
                if answer and answer.lower() != UNKNOWN_CATEGORY.lower():
                    logger.debug("Model chose unknown category %r for %s", answer, sender)
                result = SenderCategory(sender=sender, category=UNKNOWN_CATEGORY)
            else:
                result = SenderCategory(sender=sender, category=category.name, category_id=category.id)
            self.newsletters.set_category(user.id, sender, result.category_id)
            results.append(result)

        logger.info(
            "Categorized %d senders for %s (%d unknown)",
            len(results),
            user.email,
            sum(1 for r in results if r.category_id is None),
        )
        return results
