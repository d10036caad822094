from __future__ import annotations

from typing import Any

from .errors import PipelineError


def success_body(payload: dict[str, Any], user_input: str) -> dict[str, Any]:
    """Model output plus the caller's original text under `input` (overrides the model's)."""
    body = dict(payload)
    body["input"] = user_input
    return body


def error_body(reasoning: str) -> dict[str, Any]:
    return {"status": "error", "reasoning": reasoning}


def failure(exc: PipelineError) -> tuple[int, dict[str, Any]]:
    return exc.status_code, error_body(exc.reasoning)
