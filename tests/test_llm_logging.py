"""Tests for LLM call logging functionality."""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from inbox_zero.db.models import LLMCallRepository, UserRepository
from inbox_zero.llm.config import LLMConfig
from inbox_zero.llm.gateway import LLMGateway, parse_json_response, strip_code_fences


@pytest.fixture
def call_repo(db):
    """Create an LLM call repository (with a user for foreign keys)."""
    UserRepository(db).create("test@example.com", "Test User")
    return LLMCallRepository(db)


@pytest.fixture
def llm_gateway(call_repo):
    """Create an LLM gateway with call logging."""
    config = LLMConfig(
        default_model="anthropic/claude-haiku-4",
        calendar_model="anthropic/claude-sonnet-4",
    )
    return LLMGateway(config, call_repo=call_repo)


def _logged_calls(db):
    return db.execute("SELECT * FROM llm_calls ORDER BY id")


def _response(content, prompt_tokens=100, completion_tokens=50):
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(content=content))]
    mock_response.usage = Mock(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )
    return mock_response


def test_llm_call_repository_log(call_repo, db):
    """Test that LLM calls can be logged."""
    call_id = call_repo.log(
        call_type="analyze_calendar",
        model="anthropic/claude-haiku-4",
        user_id=1,
        system_prompt="You analyze emails.",
        user_message="Subject: Lunch",
        response_text='{"shouldCreateEvent": false}',
        prompt_tokens=100,
        completion_tokens=50,
        total_tokens=150,
        latency_ms=500,
    )

    assert call_id > 0

    calls = _logged_calls(db)
    assert len(calls) == 1
    assert calls[0]["call_type"] == "analyze_calendar"
    assert calls[0]["total_tokens"] == 150
    assert calls[0]["latency_ms"] == 500


@patch("litellm.completion")
def test_complete_logs_call(mock_completion, llm_gateway, db):
    mock_completion.return_value = _response('{"shouldCreateEvent": false, "confidence": 0.1}')

    result = llm_gateway.complete(
        "analyze_calendar",
        "You analyze emails.",
        "Subject: Lunch",
        model="anthropic/claude-sonnet-4",
        user_id=1,
        api_key="user-key",
    )

    assert result == '{"shouldCreateEvent": false, "confidence": 0.1}'
    kwargs = mock_completion.call_args.kwargs
    assert kwargs["model"] == "anthropic/claude-sonnet-4"
    assert kwargs["api_key"] == "user-key"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": "You analyze emails."}

    calls = _logged_calls(db)
    assert len(calls) == 1
    assert calls[0]["user_id"] == 1
    assert calls[0]["model"] == "anthropic/claude-sonnet-4"
    assert calls[0]["total_tokens"] == 150
    assert calls[0]["error"] is None


@patch("litellm.completion")
def test_complete_uses_default_model(mock_completion, llm_gateway):
    mock_completion.return_value = _response("plain text")

    llm_gateway.complete("misc", "system", "user", json_mode=False)

    kwargs = mock_completion.call_args.kwargs
    assert kwargs["model"] == "anthropic/claude-haiku-4"
    assert "response_format" not in kwargs
    assert "api_key" not in kwargs


@patch("litellm.completion")
def test_complete_logs_and_reraises_errors(mock_completion, llm_gateway, db):
    mock_completion.side_effect = RuntimeError("API error")

    with pytest.raises(RuntimeError, match="API error"):
        llm_gateway.complete("categorize_senders", "system", "user", user_id=1)

    calls = _logged_calls(db)
    assert len(calls) == 1
    assert calls[0]["error"] == "API error"
    assert calls[0]["response_text"] is None


@patch("litellm.completion")
def test_logging_failure_does_not_break_call(mock_completion):
    mock_completion.return_value = _response("{}")
    broken_repo = Mock()
    broken_repo.log.side_effect = RuntimeError("disk full")
    gateway = LLMGateway(LLMConfig(), call_repo=broken_repo)

    assert gateway.complete("misc", "system", "user") == "{}"


class TestJsonHelpers:
    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'

    def test_parse_json_response(self):
        assert parse_json_response('```\n{"senders": []}\n```') == {"senders": []}

    def test_parse_invalid_json(self):
        with pytest.raises(ValueError):
            parse_json_response("not json")
