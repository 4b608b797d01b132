"""Domain models used across the project."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# Type alias for embedding vectors (EMBEDDING_DIMENSIONS floats)
Embedding = List[float]


class InterpretationSource(str, Enum):
    """Provenance tag stored on every interpretation."""

    AUTOMATIC = "AUTOMATIC"
    MANUAL = "MANUAL"


@dataclass(slots=True, frozen=True)
class EventRecord:
    """The read-only fields of an event needed to interpret it."""

    id: str
    user_id: str
    content: str
    occurred_at: datetime


@dataclass(slots=True, frozen=True)
class UserContext:
    """Optional personalisation passed to the model alongside the event."""

    name: str = "User"
    baseline: str = "No baseline available yet."


@dataclass(slots=True)
class InterpretResult:
    """Outcome of one pipeline invocation."""

    success: bool
    interpretation_id: Optional[str] = None
    skipped: bool = False
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "success": self.success,
            "interpretationId": self.interpretation_id,
            "skipped": self.skipped,
        }
        if self.reason is not None:
            result["reason"] = self.reason
        return result


@dataclass(slots=True)
class EmbeddingResult:
    """Vector returned by the embedding gateway plus request metadata."""

    embedding: Embedding
    model: str
    dimensions: int
    prompt_tokens: int = 0
    total_tokens: int = 0


@dataclass(slots=True)
class JobResult:
    """What a queue worker needs to acknowledge or reschedule a job."""

    success: bool
    interpretation_id: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None
    should_retry: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

__all__ = [
    "Embedding",
    "InterpretationSource",
    "EventRecord",
    "UserContext",
    "InterpretResult",
    "EmbeddingResult",
    "JobResult",
]
