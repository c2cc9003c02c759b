"""LLM configuration — model selection, defaults."""

from __future__ import annotations

from dataclasses import dataclass

from inbox_zero.config import AppConfig


@dataclass
class LLMConfig:
    default_model: str = "gemini/gemini-2.0-flash"
    calendar_model: str = "gemini/gemini-2.0-flash"
    categorize_model: str = "gemini/gemini-2.0-flash"
    max_calendar_tokens: int = 1024
    max_categorize_tokens: int = 2048

    @classmethod
    def from_app_config(cls, config: AppConfig) -> LLMConfig:
        return cls(
            default_model=config.llm.default_model,
            calendar_model=config.llm.calendar_model,
            categorize_model=config.llm.categorize_model,
            max_calendar_tokens=config.llm.max_calendar_tokens,
            max_categorize_tokens=config.llm.max_categorize_tokens,
        )
