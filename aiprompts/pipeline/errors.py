from __future__ import annotations


class PipelineError(Exception):
    """Terminal failure for one request; `reasoning` is safe to show to the caller."""

    status_code: int = 500

    def __init__(self, reasoning: str, *, status_code: int | None = None) -> None:
        super().__init__(reasoning)
        self.reasoning = reasoning
        if status_code is not None:
            self.status_code = int(status_code)


class ClientValidationError(PipelineError):
    """Bad method, content type, body, mode parameter, or a forged watermark."""

    status_code = 400


class ProviderRefusalError(PipelineError):
    """The model returned empty text, read as a safety/injection refusal."""

    status_code = 400


class UnknownModeError(PipelineError):
    # 500 is kept for compatibility with existing clients, even though the caller is at fault.
    status_code = 500

    def __init__(self, mode: str, valid_modes: list[str]) -> None:
        super().__init__(f"Invalid Mode. Must be one of: {','.join(valid_modes)}.")
        self.mode = mode
        self.valid_modes = list(valid_modes)


class PromptGenerationError(PipelineError):
    status_code = 500


class ExtractionExhaustedError(PipelineError):
    """Every attempt finished without a parseable JSON object."""

    status_code = 500


class ProviderCallError(PipelineError):
    """Transport or provider-side failure. Not retried."""

    status_code = 500
