"""Queue-facing handler for INTERPRET_EVENT jobs.

The pipeline never retries on its own. This handler turns its outcome into
a :class:`JobResult` so the worker that owns the queue can decide whether to
acknowledge the job or schedule another attempt.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .errors import InterpretationError
from .models import JobResult
from .services.storage import InterpretationStore
from .workflows.interpretation_pipeline import run

logger = logging.getLogger(__name__)


def handle_interpret_event(
    payload: Mapping[str, Any],
    job_id: Optional[str] = None,
    *,
    store: Optional[InterpretationStore] = None,
) -> JobResult:
    """Run the interpretation pipeline for ``payload["eventId"]``."""
    event_id = payload.get("eventId")
    if not event_id:
        logger.error("Job %s has no eventId in payload", job_id)
        return JobResult(success=False, error="Missing eventId in payload", should_retry=False)

    try:
        result = run(str(event_id), store=store)
    except InterpretationError as exc:
        logger.error(
            "Job %s failed for event %s: %s (%s)",
            job_id,
            event_id,
            exc.message,
            type(exc).__name__,
        )
        return JobResult(
            success=False,
            error=exc.message,
            should_retry=exc.retryable,
            metadata={"errorKind": type(exc).__name__, "eventId": str(event_id)},
        )

    metadata = {"eventId": str(event_id)}
    if result.reason:
        metadata["reason"] = result.reason
    return JobResult(
        success=result.success,
        interpretation_id=result.interpretation_id,
        skipped=result.skipped,
        metadata=metadata,
    )

__all__ = ["handle_interpret_event"]
