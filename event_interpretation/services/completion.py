"""Chat completion requests for prompt-driven workers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..clients.openai_client import get_openai
from ..prompts import PromptConfig

DEFAULT_RESPONSE_FORMAT: str = "json_object"

logger = logging.getLogger(__name__)


def request_completion(prompt: PromptConfig, user_message: str) -> Optional[str]:
    """Send *user_message* under *prompt* and return the first choice's text.

    Returns ``None`` when the response has no choices or no message content.
    Provider errors propagate to the caller.
    """
    model = prompt.model
    params: Dict[str, Any] = {
        "model": model.model,
        "messages": [
            {"role": "system", "content": prompt.system_prompt},
            {"role": "user", "content": user_message},
        ],
        "temperature": model.temperature,
        "response_format": {"type": model.response_format or DEFAULT_RESPONSE_FORMAT},
    }
    if model.max_tokens is not None:
        params["max_tokens"] = model.max_tokens

    logger.info("Requesting '%s' completion from %s", prompt.id, model.model)
    response = get_openai().chat.completions.create(**params)

    if not response.choices:
        return None
    message = response.choices[0].message
    content: Optional[str] = getattr(message, "content", None)
    logger.debug("Raw completion (%d chars)", len(content or ""))
    return content

__all__ = ["request_completion", "DEFAULT_RESPONSE_FORMAT"]
