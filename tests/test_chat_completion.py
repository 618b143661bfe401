from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from course_chat.errors import UpstreamError
from course_chat.llm import chat_completion
from course_chat.llm.chat_completion import INTERPRET_PREFIX, ChatCompletionClient


def _reply(content) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class _FakeCompletions:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _fake_client(completions: _FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _client(completions: _FakeCompletions, api_key: str | None = "sk-test") -> ChatCompletionClient:
    return ChatCompletionClient(
        api_key=api_key,
        model="gpt-3.5-turbo",
        base_url="https://llm.example.com/v1",
        timeout_seconds=7.5,
        client=_fake_client(completions),
    )


def test_interpret_returns_first_choice_text() -> None:
    completions = _FakeCompletions(_reply("web development"))

    assert _client(completions).interpret("build sites") == "web development"

    call = completions.calls[0]
    assert call["model"] == "gpt-3.5-turbo"
    assert call["messages"][0] == {"role": "system", "content": "You are a helpful assistant."}
    assert call["messages"][1]["content"] == INTERPRET_PREFIX + "build sites"


def test_sdk_client_gets_base_url_and_explicit_timeout(monkeypatch) -> None:
    created: list[dict] = []

    def _fake_openai(**kwargs):
        created.append(kwargs)
        return _fake_client(_FakeCompletions(_reply("python")))

    monkeypatch.setattr(chat_completion, "OpenAI", _fake_openai)
    client = ChatCompletionClient(
        api_key="sk-test",
        model="gpt-3.5-turbo",
        base_url="https://llm.example.com/v1",
        timeout_seconds=7.5,
    )

    assert client.complete("hello") == "python"
    assert created == [
        {"api_key": "sk-test", "base_url": "https://llm.example.com/v1", "timeout": 7.5, "max_retries": 0}
    ]


def test_missing_api_key_fails_without_network_call() -> None:
    completions = _FakeCompletions()

    with pytest.raises(UpstreamError, match="API key not found"):
        _client(completions, api_key=None).complete("hello")
    assert completions.calls == []


def test_transport_error_becomes_upstream_error() -> None:
    request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
    completions = _FakeCompletions(error=openai.APIConnectionError(request=request))

    with pytest.raises(UpstreamError, match="Chat completion request failed"):
        _client(completions).complete("hello")


def test_timeout_becomes_upstream_error() -> None:
    request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
    completions = _FakeCompletions(error=openai.APITimeoutError(request=request))

    with pytest.raises(UpstreamError):
        _client(completions).complete("hello")


@pytest.mark.parametrize(
    "response",
    [
        SimpleNamespace(),
        SimpleNamespace(choices=[]),
        SimpleNamespace(choices=[SimpleNamespace()]),
        _reply(None),
        _reply(42),
    ],
)
def test_unexpected_shape_becomes_upstream_error(response) -> None:
    with pytest.raises(UpstreamError):
        _client(_FakeCompletions(response)).complete("hello")
