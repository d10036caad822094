from __future__ import annotations

import re
from typing import Any


_VAR_RE = re.compile(r"\{\{\s*(?P<key>[a-zA-Z0-9_]+)\s*\}\}")
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def render_template(template: str, variables: dict[str, Any]) -> str:
    """Substitute `{{var}}` placeholders; single braces (JSON examples) are left alone.

    Substitution is a single pass, so placeholder syntax inside a value is not expanded again.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group("key")
        value = variables.get(key, "")
        return str(value)

    return _VAR_RE.sub(_replace, template)


def collapse_newlines(text: str) -> str:
    """Replace every line break with a single space."""
    return _NEWLINE_RE.sub(" ", text)
