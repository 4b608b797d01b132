"""Utilities for decoding structured outputs returned by LLM calls.

Decoding is deliberately separate from validation: a completion that is not
JSON at all is a different failure from JSON with the wrong shape.
"""

from __future__ import annotations

import json
from typing import Any

from .text_cleaning import strip_code_fences

__all__ = ["decode_completion"]


def decode_completion(response_text: str) -> Any:
    """Decode the JSON value in an LLM response.

    Parameters
    ----------
    response_text
        The raw message content returned by the chat completion.

    Returns
    -------
    Any
        Whatever JSON value the text holds; its shape is not checked here.

    Raises
    ------
    json.JSONDecodeError
        If the text, once any surrounding code fence is removed, is not
        valid JSON.
    """
    return json.loads(strip_code_fences(response_text))
