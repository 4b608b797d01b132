"""Service layer modules grouping gateway and storage logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from event_interpretation.services import embed_text` without having
to know which underlying module provides the symbol.
"""

from .completion import request_completion  # noqa: F401
from .embeddings import embed_text, cosine_similarity  # noqa: F401
from .storage import InterpretationStore  # noqa: F401

__all__ = [
    "request_completion",
    "embed_text",
    "cosine_similarity",
    "InterpretationStore",
]
