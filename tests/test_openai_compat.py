from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from aiprompts.llm.openai_compat import LLMConfigError, OpenAICompatibleGenerationClient


class _FakeCompletions:
    def __init__(self, contents: list[str | None]) -> None:
        self.contents = contents
        self.payloads: list[dict[str, Any]] = []

    def create(self, **payload: Any) -> Any:
        self.payloads.append(payload)
        choices = [
            SimpleNamespace(message=SimpleNamespace(content=c), finish_reason="stop") for c in self.contents
        ]
        return SimpleNamespace(choices=choices, model_dump=lambda: {"choices": len(choices)})


def _client_with(contents: list[str | None]) -> tuple[OpenAICompatibleGenerationClient, _FakeCompletions]:
    client = OpenAICompatibleGenerationClient(
        base_url="http://llm.invalid/v1",
        api_key="sk-test",
        model="test-model",
        temperature=0.1,
        timeout_s=5.0,
    )
    completions = _FakeCompletions(contents)
    client._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


def test_generate_sends_single_user_message() -> None:
    client, completions = _client_with(['{"status": "success"}'])
    client.generate("the prompt", candidate_count=1)
    assert completions.payloads == [
        {
            "model": "test-model",
            "messages": [{"role": "user", "content": "the prompt"}],
            "temperature": 0.1,
            "n": 1,
        }
    ]


def test_generate_maps_choices_to_candidates() -> None:
    client, _ = _client_with(["first", None])
    resp = client.generate("p", candidate_count=2)
    assert [c.parts[0].text for c in resp.candidates] == ["first", None]
    assert resp.candidates[0].finish_reason == "stop"
    assert resp.raw == {"choices": 2}


def test_generate_propagates_sdk_errors() -> None:
    client, completions = _client_with([])

    def _boom(**_payload: Any) -> Any:
        raise RuntimeError("connection reset")

    completions.create = _boom  # type: ignore[method-assign]
    with pytest.raises(RuntimeError):
        client.generate("p")


def test_missing_api_key_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AIPROMPTS_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(LLMConfigError):
        OpenAICompatibleGenerationClient(base_url="http://llm.invalid/v1")


def test_env_fallbacks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIPROMPTS_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_API_BASE", "http://gateway.invalid/v1")
    monkeypatch.setenv("LLM_MODEL", "env-model")
    client = OpenAICompatibleGenerationClient()
    assert client.api_key == "sk-env"
    assert client.base_url == "http://gateway.invalid/v1"
    assert client.model == "env-model"
