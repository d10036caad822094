from __future__ import annotations

import json
from typing import Any

import structlog


log = structlog.get_logger("aiprompts.json_extract")


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not JSON; the stdlib decoder accepts them by default.
    raise ValueError(f"Invalid JSON constant: {name}")


def _loads_strict(candidate: str) -> Any:
    return json.loads(candidate, parse_constant=_reject_constant)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Find a balanced `{...}` span in an LLM reply that parses as JSON.

    A span from `{` to `}` can only decode as an object, so the result is a dict.

    Scan order:
    - start at the first `{` and try the last `}` first, then each earlier `}`
    - when no closing brace works for this opening brace, move to the next `{`

    The first successful parse wins. Nothing is repaired: a span that is not
    valid JSON is skipped, so `{bad: 1}` never matches.

    Returns None when no span parses, or as soon as a span is nested too deeply
    for the decoder; the scan stops there rather than retry that depth for
    every remaining brace pair.
    """
    if not text:
        return None

    first_open = text.find("{")
    if first_open == -1:
        return None

    last_close = text.rfind("}")
    while first_open != -1:
        close = last_close
        if close <= first_open:
            # Every later `{` sits even further right; nothing can close it.
            log.debug("json_extract_no_close", open=first_open, close=close)
            return None

        while close > first_open:
            candidate = text[first_open : close + 1]
            try:
                value = _loads_strict(candidate)
            except RecursionError:
                log.debug("json_extract_too_deep", open=first_open, close=close)
                return None
            except ValueError:
                log.debug("json_extract_candidate_failed", open=first_open, close=close)
            else:
                log.debug("json_extract_found", open=first_open, close=close)
                return value
            close = text.rfind("}", 0, close)

        first_open = text.find("{", first_open + 1)

    return None
