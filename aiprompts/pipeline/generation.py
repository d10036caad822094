from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from aiprompts.llm.provider import GenerationProvider
from aiprompts.utils.json_extract import extract_json_object

from .errors import ExtractionExhaustedError, ProviderCallError, ProviderRefusalError


log = structlog.get_logger("aiprompts.generation")

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class GenerationResult:
    payload: dict[str, Any]
    attempts: int


class GenerationOrchestrator:
    """Bounded retry loop around the provider.

    Outcomes per attempt:
    - empty text part: the provider refused, fail now (ProviderRefusalError)
    - provider raised: fail now (ProviderCallError)
    - no JSON object in any part: try again, up to `max_attempts`
    - JSON object found: return it
    """

    def __init__(self, provider: GenerationProvider, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.provider = provider
        self.max_attempts = int(max_attempts)

    def generate(self, prompt: str) -> GenerationResult:
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.provider.generate(prompt, candidate_count=1)
            except Exception as e:
                log.error("provider_call_failed", attempt=attempt, error_type=type(e).__name__, error=str(e))
                raise ProviderCallError("Error while generating response.") from e

            log.debug("provider_replied", attempt=attempt, candidates=len(response.candidates))

            for candidate in response.candidates:
                for part in candidate.parts:
                    if not part.text:
                        log.warning("provider_refused", attempt=attempt, finish_reason=candidate.finish_reason)
                        raise ProviderRefusalError("Invalid input format or potential prompt injection attempt.")

                    payload = extract_json_object(part.text)
                    if payload is not None:
                        log.info("generation_succeeded", attempt=attempt)
                        return GenerationResult(payload=payload, attempts=attempt)

            log.info("generation_attempt_unparsed", attempt=attempt, max_attempts=self.max_attempts)

        raise ExtractionExhaustedError("Unknown error.")
