from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel, Field, StrictStr, ValidationError

from .errors import ClientValidationError
from .prompts import WATERMARK_END, WATERMARK_START


log = structlog.get_logger("aiprompts.guard")

JSON_CONTENT_TYPE = "application/json"


class PromptBody(BaseModel):
    data: StrictStr = Field(min_length=1)


@dataclass(frozen=True)
class PromptRequest:
    """Transport-neutral view of an incoming request.

    `body` is either the raw payload (bytes/str, decoded here) or an already
    decoded JSON value.
    """

    method: str
    content_type: str | None
    body: Any
    query: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidatedInput:
    data: str
    mode: str


def _media_type(content_type: str | None) -> str:
    # Parameters such as `; charset=utf-8` do not change the media type.
    return (content_type or "").split(";", 1)[0].strip().lower()


def _decode_body(body: Any) -> Any:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(body, str):
        try:
            return json.loads(body)
        except (ValueError, RecursionError):
            return None
    return body


def contains_watermark(text: str) -> bool:
    return WATERMARK_START in text or WATERMARK_END in text


def validate_request(request: PromptRequest) -> ValidatedInput:
    """Run the request checks in order and stop at the first failure."""
    if request.method.upper() != "POST":
        log.info("request_rejected", reason="method", method=request.method)
        raise ClientValidationError("Method Not Allowed. Use POST.", status_code=405)

    if _media_type(request.content_type) != JSON_CONTENT_TYPE:
        log.info("request_rejected", reason="content_type", content_type=request.content_type)
        raise ClientValidationError("Invalid Content-Type. Use application/json.")

    payload = _decode_body(request.body)
    try:
        body = PromptBody.model_validate(payload)
    except ValidationError:
        log.info("request_rejected", reason="missing_data")
        raise ClientValidationError("Data not found in the request body. (missing data field)") from None

    if contains_watermark(body.data):
        log.warning("request_rejected", reason="prompt_injection")
        raise ClientValidationError("Prompt injection detected.")

    mode = request.query.get("mode")
    if not mode:
        log.info("request_rejected", reason="missing_mode")
        raise ClientValidationError("Mode not found in the request query.")

    return ValidatedInput(data=body.data, mode=mode)
