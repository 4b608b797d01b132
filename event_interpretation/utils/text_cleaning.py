"""Shared helper utilities for cleaning raw LLM text."""

from __future__ import annotations

from typing import Final

_FENCE: Final[str] = "```"

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json … ```) if present.

    Text without fences is returned stripped but otherwise unchanged.
    """
    cleaned: str = text.strip()

    if cleaned.startswith(_FENCE + "json"):
        cleaned = cleaned[len(_FENCE + "json") :].strip()
    elif cleaned.startswith(_FENCE):
        cleaned = cleaned[len(_FENCE) :].strip()
    else:
        return cleaned

    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)].strip()

    return cleaned

__all__ = ["strip_code_fences"]
