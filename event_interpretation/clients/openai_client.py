"""Singleton accessor for the OpenAI SDK client."""

from __future__ import annotations

from openai import OpenAI as _OpenAIClient

from ..config import OPENAI_API_KEY

_client: _OpenAIClient | None = None


def get_openai() -> _OpenAIClient:
    """Return a singleton instance of :class:`openai.OpenAI`.

    The client is created on first use so that importing the services does
    not require ``OPENAI_API_KEY`` to be set.
    """
    global _client
    if _client is None:
        if not OPENAI_API_KEY:
            raise EnvironmentError("OPENAI_API_KEY is not set in environment variables")
        _client = _OpenAIClient(api_key=OPENAI_API_KEY)
    return _client

__all__ = ["get_openai"]
