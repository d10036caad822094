from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class TextPart:
    text: str | None


@dataclass(frozen=True)
class Candidate:
    parts: list[TextPart] = field(default_factory=list)
    finish_reason: str | None = None


@dataclass(frozen=True)
class GenerationResponse:
    candidates: list[Candidate]
    raw: dict[str, Any] = field(default_factory=dict)


class GenerationProvider(Protocol):
    """Anything that turns one prompt string into candidate replies.

    Implementations may raise on transport or provider-side failures.
    """

    model: str

    def generate(self, prompt: str, *, candidate_count: int = 1) -> GenerationResponse: ...
