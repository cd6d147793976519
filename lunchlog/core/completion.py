"""
Completion service client.

Wraps the OpenAI chat completions API. Every call asks for a JSON response
(either a strict json_schema contract or a looser json_object one) and
returns the parsed object. Anything short of a parseable JSON object is a
CompletionError; callers decide the fallback.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from lunchlog.config.settings import Settings
from lunchlog.core.retry import RetryPolicy

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class CompletionError(Exception):
    pass


def json_schema_format(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "strict": True, "schema": schema},
    }


JSON_OBJECT_FORMAT = {"type": "json_object"}


class CompletionClient:
    def __init__(self, settings: Settings, retry: Optional[RetryPolicy] = None):
        self.model = settings.llm_model
        self.vision_model = settings.llm_vision_model or settings.llm_model
        self.retry = retry or RetryPolicy.from_settings(settings, retry_on=TRANSIENT_ERRORS)
        self._client: Optional[OpenAI] = None
        if settings.openai_api_key:
            self._client = OpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.llm_base_url,
                max_retries=0,
            )
        else:
            logger.warning("OPENAI_API_KEY not configured; AI features will use fallbacks")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None

    def complete_json(
        self,
        messages: List[Dict[str, Any]],
        response_format: Dict[str, Any],
        vision: bool = False,
    ) -> Dict[str, Any]:
        """Send role-tagged messages and return the parsed JSON object."""
        if self._client is None:
            raise CompletionError("Completion service not configured")

        model = self.vision_model if vision else self.model
        try:
            response = self.retry.call(
                self._client.chat.completions.create,
                model=model,
                messages=messages,
                response_format=response_format,
            )
        except openai.OpenAIError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not isinstance(content, str):
            raise CompletionError("No response from completion service")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise CompletionError(f"Completion response is not valid JSON: {e}") from e

        if not isinstance(parsed, dict):
            raise CompletionError("Completion response is not a JSON object")
        return parsed
