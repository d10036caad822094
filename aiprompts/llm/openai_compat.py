from __future__ import annotations

import os
from typing import Any

from .provider import Candidate, GenerationResponse, TextPart


class LLMConfigError(RuntimeError):
    pass


class OpenAICompatibleGenerationClient:
    """Generation provider backed by any OpenAI-compatible chat endpoint.

    The prompt is sent as one user message and every returned choice becomes a
    `Candidate` with a single text part. SDK-level retries are disabled: the
    caller owns the retry policy, and `timeout_s` bounds each call.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float = 0.1,
        timeout_s: float | None = None,
        max_retries: int = 0,
    ) -> None:
        self.base_url = (
            base_url
            or os.getenv("OPENAI_API_BASE")
            or os.getenv("OPENAI_BASE_URL")
            or "https://api.openai.com/v1"
        )
        self.api_key = api_key or os.getenv("AIPROMPTS_API_KEY") or os.getenv("OPENAI_API_KEY")
        self.model = model or os.getenv("LLM_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini"
        self.temperature = float(temperature)
        self.timeout_s = timeout_s

        if not self.api_key:
            raise LLMConfigError("Missing AIPROMPTS_API_KEY / OPENAI_API_KEY (or provide api_key explicitly).")

        try:
            from openai import OpenAI  # type: ignore
        except Exception as e:
            raise LLMConfigError("Missing dependency: openai. Install it in the runtime environment.") from e

        self._client = OpenAI(
            base_url=self.base_url,
            api_key=self.api_key,
            timeout=self.timeout_s,
            max_retries=int(max_retries),
        )

    def generate(self, prompt: str, *, candidate_count: int = 1) -> GenerationResponse:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "n": int(candidate_count),
        }
        resp = self._client.chat.completions.create(**payload)
        raw = resp.model_dump()

        candidates: list[Candidate] = []
        for choice in resp.choices or []:
            msg = getattr(choice, "message", None)
            content = getattr(msg, "content", None) if msg is not None else None
            candidates.append(
                Candidate(
                    parts=[TextPart(text=content if isinstance(content, str) else None)],
                    finish_reason=getattr(choice, "finish_reason", None),
                )
            )
        return GenerationResponse(candidates=candidates, raw=raw)
