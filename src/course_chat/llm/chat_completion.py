from __future__ import annotations

import logging
from typing import Any

import openai
from openai import OpenAI

from course_chat.config import Settings
from course_chat.errors import UpstreamError

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = "You are a helpful assistant."
INTERPRET_PREFIX = "Interpret this query and relate it to courses: "


class ChatCompletionClient:
    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        base_url: str,
        timeout_seconds: float,
        client: Any | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatCompletionClient":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.openai_timeout_seconds,
        )

    def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise UpstreamError("API key not found")

        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
        except openai.APIError as exc:
            logger.warning("Chat completion request failed: %s", exc)
            raise UpstreamError(f"Chat completion request failed: {exc}") from exc

        return _first_completion_text(response)

    def interpret(self, question: str) -> str:
        return self.complete(INTERPRET_PREFIX + question)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client


def _first_completion_text(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise UpstreamError("Chat completion response is missing choices[0].message.content") from exc
    if not isinstance(content, str):
        raise UpstreamError("Chat completion content is not text")
    return content
