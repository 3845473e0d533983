"""Rendering of arguments and results for diagnostic messages."""

from __future__ import annotations

import json
from typing import Any

from doublecheck.config import get_settings


def format_value(value: Any) -> str:
    """Render *value* as indented JSON, falling back to ``repr``.

    Tuples render as JSON arrays.  Objects JSON cannot encode are rendered
    with ``repr`` in place.  Long renderings are truncated.
    """
    settings = get_settings()
    try:
        text = json.dumps(value, indent=settings.indent, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        # circular references, non-string keys
        text = repr(value)
    if settings.max_repr and len(text) > settings.max_repr:
        text = text[: settings.max_repr] + "…"
    return text
