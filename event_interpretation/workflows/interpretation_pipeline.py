"""Event interpretation pipeline: completion, validation, embedding, storage.

One invocation turns one event into at most one stored interpretation. It is
safe to call repeatedly and concurrently for the same event: an existing
interpretation short-circuits the run, and a duplicate that loses the race
at the unique index is reported as a skip rather than an error.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from openai import OpenAIError

from ..errors import (
    CompletionFailure,
    CompletionSchemaViolation,
    EmbeddingFailure,
    EmptyCompletion,
    EventNotFound,
    InvalidCompletionFormat,
    PersistenceFailure,
    UniquenessConflict,
)
from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..models import EmbeddingResult, EventRecord, InterpretationSource, InterpretResult, UserContext
from ..prompts import INTERPRETATION_PROMPT, PromptConfig
from ..schema import validate_interpretation_output
from ..services.completion import request_completion
from ..services.embeddings import embed_text
from ..services.storage import InterpretationStore
from ..utils.datetime_utils import to_iso8601
from ..utils.llm_parsing import decode_completion

ALREADY_EXISTS = "Interpretation already exists"
CREATED_CONCURRENTLY = "Interpretation created concurrently"

logger = logging.getLogger(__name__)


def build_user_message(event: EventRecord, user: UserContext) -> str:
    """Serialise the event and its owner's context as the user-role message."""
    return json.dumps(
        {
            "userName": user.name,
            "userBaseline": user.baseline,
            "event": {
                "content": event.content,
                "occurredAt": to_iso8601(event.occurred_at),
            },
        }
    )


def run(
    event_id: str,
    *,
    store: Optional[InterpretationStore] = None,
    prompt: PromptConfig = INTERPRETATION_PROMPT,
) -> InterpretResult:
    """Generate, embed and store the interpretation for *event_id*.

    Returns a skipped result when the event already has an interpretation.
    Raises an :class:`~event_interpretation.errors.InterpretationError`
    subclass for every other failure; nothing is written in that case.
    """
    store = store if store is not None else InterpretationStore()
    logger.info("Interpreting event %s", event_id)

    # 1. Idempotency
    existing_id = store.find_interpretation_id(event_id)
    if existing_id is not None:
        logger.info("Event %s already interpreted as %s – skipping", event_id, existing_id)
        return InterpretResult(
            success=True,
            interpretation_id=existing_id,
            skipped=True,
            reason=ALREADY_EXISTS,
        )

    # 2. Fetch
    event = store.get_event(event_id)
    if event is None:
        logger.warning("Event not found: %s", event_id)
        raise EventNotFound(f"Event not found: {event_id}")
    user = store.get_user(event.user_id)

    # 3-6. Prompt, completion, decode, validate
    content = _generate_interpretation(prompt, build_user_message(event, user))

    # 7. Embed
    embedding = _embed_interpretation(content)

    # 8. Atomic persist
    try:
        interpretation_id = store.create_interpretation(
            user_id=event.user_id,
            event_id=event.id,
            content=content,
            embedding=embedding.embedding,
            embedding_model=embedding.model,
            source=InterpretationSource.AUTOMATIC,
        )
    except UniquenessConflict as exc:
        winner_id = store.find_interpretation_id(event_id)
        if winner_id is None:
            # The competing write has not committed yet (or was rolled back);
            # a later attempt either sees it or creates the interpretation.
            logger.warning("Conflicting interpretation for event %s is not visible yet", event_id)
            raise PersistenceFailure(
                f"Duplicate interpretation reported but none found for event: {event_id}",
                exc,
                retryable=True,
            ) from exc
        logger.info("Event %s interpreted concurrently as %s – skipping", event_id, winner_id)
        return InterpretResult(
            success=True,
            interpretation_id=winner_id,
            skipped=True,
            reason=CREATED_CONCURRENTLY,
        )

    logger.info("Created interpretation %s for event %s", interpretation_id, event_id)
    return InterpretResult(success=True, interpretation_id=interpretation_id, skipped=False)


def _generate_interpretation(prompt: PromptConfig, user_message: str) -> str:
    """Request the completion and return its validated interpretation text."""
    try:
        raw_response = request_completion(prompt, user_message)
    except OpenAIError as exc:
        logger.error("Completion request failed: %s", exc)
        raise CompletionFailure("LLM completion request failed", exc) from exc

    if raw_response is None or not raw_response.strip():
        raise EmptyCompletion("LLM returned empty response")

    try:
        parsed = decode_completion(raw_response)
    except json.JSONDecodeError as exc:
        logger.warning("Completion is not valid JSON: %s", exc)
        raise InvalidCompletionFormat("LLM returned invalid JSON", exc) from exc

    validated = validate_interpretation_output(parsed)
    if not validated.ok:
        logger.warning("Completion failed validation: %s", validated.message)
        raise CompletionSchemaViolation(
            f"LLM output validation failed: {validated.message}",
            violation=validated.violation,
        )
    return validated.document.interpretation


def _embed_interpretation(content: str) -> EmbeddingResult:
    try:
        return embed_text(content)
    except (OpenAIError, ValueError) as exc:
        logger.error("Embedding failed: %s", exc)
        raise EmbeddingFailure("Failed to embed interpretation", exc) from exc

__all__ = ["run", "build_user_message", "ALREADY_EXISTS", "CREATED_CONCURRENTLY"]
