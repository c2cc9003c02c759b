"""LLM Gateway — model-agnostic interface backed by LiteLLM."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import TYPE_CHECKING, Any

import litellm

from inbox_zero.llm.config import LLMConfig

if TYPE_CHECKING:
    from inbox_zero.db.models import LLMCallRepository

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Strip markdown code fences (```json ... ```) that some models wrap around JSON."""
    m = _FENCE_RE.search(text)
    return m.group(1).strip() if m else text.strip()


def parse_json_response(text: str) -> Any:
    """Decode a model's JSON answer, tolerating code fences.

    Raises ``ValueError`` (``json.JSONDecodeError``) when it is not JSON.
    """
    return json.loads(strip_code_fences(text or ""))


class LLMGateway:
    """Model-agnostic LLM interface. Every call is logged to ``llm_calls``."""

    def __init__(self, config: LLMConfig, call_repo: LLMCallRepository | None = None):
        self.config = config
        self.call_repo = call_repo
        litellm.set_verbose = False

    def complete(
        self,
        call_type: str,
        system: str,
        user_message: str,
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        json_mode: bool = True,
        user_id: int | None = None,
        api_key: str | None = None,
    ) -> str:
        """Run one chat completion and return the response text.

        Errors from the provider are logged (to the log and ``llm_calls``)
        and re-raised; callers decide what a failure means.
        """
        used_model = model or self.config.default_model
        start_time = time.monotonic()

        completion_kwargs: dict[str, Any] = {
            "model": used_model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            completion_kwargs["response_format"] = {"type": "json_object"}
        if api_key:
            completion_kwargs["api_key"] = api_key

        try:
            response = litellm.completion(**completion_kwargs)
        except Exception as e:
            logger.error("LLM %s call failed: %s", call_type, e)
            self._log_call(
                call_type,
                used_model,
                user_id,
                system,
                user_message,
                latency_ms=int((time.monotonic() - start_time) * 1000),
                error=str(e),
            )
            raise

        latency_ms = int((time.monotonic() - start_time) * 1000)
        usage = getattr(response, "usage", None)
        response_text = response.choices[0].message.content or ""

        self._log_call(
            call_type,
            used_model,
            user_id,
            system,
            user_message,
            response_text=response_text,
            prompt_tokens=getattr(usage, "prompt_tokens", 0) if usage else 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) if usage else 0,
            total_tokens=getattr(usage, "total_tokens", 0) if usage else 0,
            latency_ms=latency_ms,
        )
        logger.debug("LLM %s call on %s took %dms", call_type, used_model, latency_ms)
        return response_text

    def _log_call(
        self,
        call_type: str,
        model: str,
        user_id: int | None,
        system: str,
        user_message: str,
        **fields: Any,
    ) -> None:
        if not self.call_repo:
            return
        try:
            self.call_repo.log(
                call_type=call_type,
                model=model,
                user_id=user_id,
                system_prompt=system,
                user_message=user_message,
                **fields,
            )
        except Exception:
            logger.exception("Failed to record LLM call")
