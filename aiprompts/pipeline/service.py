from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from .errors import PipelineError
from .generation import GenerationOrchestrator
from .guard import PromptRequest, validate_request
from .prompts import build_prompt
from .response import failure, success_body


log = structlog.get_logger("aiprompts.service")


def run_prompt(
    request: PromptRequest, make_orchestrator: Callable[[], GenerationOrchestrator]
) -> dict[str, Any]:
    """Guard, render, generate and assemble. Raises PipelineError on any failure.

    The orchestrator is only obtained once the request passed the guard and the
    prompt rendered, so rejected requests never touch the provider.
    """
    validated = validate_request(request)
    prompt = build_prompt(validated.mode, validated.data)
    result = make_orchestrator().generate(prompt)
    return success_body(result.payload, validated.data)


def handle_prompt_request(
    request: PromptRequest, make_orchestrator: Callable[[], GenerationOrchestrator]
) -> tuple[int, dict[str, Any]]:
    try:
        return 200, run_prompt(request, make_orchestrator)
    except PipelineError as e:
        log.info("request_failed", status_code=e.status_code, error_type=type(e).__name__)
        return failure(e)
