"""Completion client against a mocked OpenAI client."""

from unittest.mock import MagicMock

import httpx
import openai
import pytest

from lunchlog.config.settings import Settings
from lunchlog.core.completion import (
    CompletionClient, CompletionError, JSON_OBJECT_FORMAT, TRANSIENT_ERRORS, json_schema_format
)
from lunchlog.core.retry import RetryPolicy

MESSAGES = [{"role": "user", "content": "hi"}]


def completion_response(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


@pytest.fixture
def mock_openai():
    """Mock OpenAI client for unit tests."""
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = completion_response('{"ok": true}')
    return mock_client


@pytest.fixture
def completion(mock_openai):
    settings = Settings(openai_api_key="sk-test", llm_model="text-model", llm_vision_model="vision-model")
    client = CompletionClient(
        settings,
        retry=RetryPolicy(max_attempts=2, base_delay=0, retry_on=TRANSIENT_ERRORS, sleep=lambda _: None),
    )
    client._client = mock_openai
    return client


def test_returns_parsed_object(completion, mock_openai):
    assert completion.complete_json(MESSAGES, JSON_OBJECT_FORMAT) == {"ok": True}
    kwargs = mock_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "text-model"
    assert kwargs["response_format"] == {"type": "json_object"}


def test_vision_uses_vision_model(completion, mock_openai):
    completion.complete_json(MESSAGES, JSON_OBJECT_FORMAT, vision=True)
    assert mock_openai.chat.completions.create.call_args.kwargs["model"] == "vision-model"


def test_schema_format_is_strict():
    fmt = json_schema_format("x", {"type": "object"})
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"] == {"name": "x", "strict": True, "schema": {"type": "object"}}


@pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]"])
def test_unusable_content_raises(completion, mock_openai, content):
    mock_openai.chat.completions.create.return_value = completion_response(content)
    with pytest.raises(CompletionError):
        completion.complete_json(MESSAGES, JSON_OBJECT_FORMAT)


def test_transient_error_is_retried(completion, mock_openai):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    mock_openai.chat.completions.create.side_effect = [
        openai.APIConnectionError(request=request),
        completion_response('{"ok": 1}'),
    ]

    assert completion.complete_json(MESSAGES, JSON_OBJECT_FORMAT) == {"ok": 1}
    assert mock_openai.chat.completions.create.call_count == 2


def test_persistent_error_becomes_completion_error(completion, mock_openai):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    mock_openai.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

    with pytest.raises(CompletionError):
        completion.complete_json(MESSAGES, JSON_OBJECT_FORMAT)
    assert mock_openai.chat.completions.create.call_count == 2


def test_unconfigured_client_makes_no_call():
    client = CompletionClient(Settings(openai_api_key=None))

    assert client.is_configured is False
    with pytest.raises(CompletionError):
        client.complete_json(MESSAGES, JSON_OBJECT_FORMAT)
