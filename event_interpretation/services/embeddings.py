"""Embedding utilities using the OpenAI API."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from ..clients.openai_client import get_openai
from ..config import EMBEDDING_DIMENSIONS, EMBEDDING_MODEL
from ..models import EmbeddingResult

logger = logging.getLogger(__name__)


def embed_text(text: str, model: Optional[str] = None) -> EmbeddingResult:
    """Generate a vector embedding for *text* using the configured model.

    Raises ``ValueError`` when the returned vector does not have
    ``EMBEDDING_DIMENSIONS`` entries, since the stored vectors must share a
    single dimensionality to be comparable.
    """
    model = model or EMBEDDING_MODEL
    logger.info("Generating embedding for text (first 50 chars): %s…", text[:50])
    response = get_openai().embeddings.create(
        model=model,
        input=text,
        dimensions=EMBEDDING_DIMENSIONS,
    )
    embedding = list(response.data[0].embedding)
    if len(embedding) != EMBEDDING_DIMENSIONS:
        raise ValueError(
            f"Embedding dimension mismatch: expected {EMBEDDING_DIMENSIONS}, got {len(embedding)}"
        )
    logger.debug("Generated embedding of length %d", len(embedding))

    usage = getattr(response, "usage", None)
    return EmbeddingResult(
        embedding=embedding,
        model=response.model,
        dimensions=len(embedding),
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        total_tokens=getattr(usage, "total_tokens", 0) or 0,
    )


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of two vectors, in [-1, 1]."""
    if len(a) != len(b):
        raise ValueError(f"Vector dimension mismatch: {len(a)} vs {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    magnitude = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if magnitude == 0:
        return 0.0
    return dot / magnitude

__all__ = ["embed_text", "cosine_similarity"]
