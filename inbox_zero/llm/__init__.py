"""LLM gateway — model-agnostic interface backed by LiteLLM."""

from inbox_zero.llm.config import LLMConfig
from inbox_zero.llm.gateway import LLMGateway

__all__ = ["LLMGateway", "LLMConfig"]
