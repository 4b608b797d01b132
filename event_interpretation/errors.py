"""Failure kinds raised by the interpretation pipeline.

Every failure carries a human-readable message and, where one exists, the
underlying exception as ``cause``. ``retryable`` tells a scheduler whether
re-invoking the pipeline for the same event can succeed.
"""

from __future__ import annotations


class InterpretationError(Exception):
    """Base exception for all interpretation pipeline failures."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        retryable: bool | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if retryable is not None:
            self.retryable = retryable


class EventNotFound(InterpretationError):
    """The event id has no matching record."""


class EmptyCompletion(InterpretationError):
    """The completion gateway returned no usable text."""

    retryable = True


class CompletionFailure(InterpretationError):
    """The completion gateway raised while generating the interpretation."""

    retryable = True


class InvalidCompletionFormat(InterpretationError):
    """The completion text could not be decoded as JSON."""

    retryable = True


class CompletionSchemaViolation(InterpretationError):
    """The decoded completion does not match the interpretation contract."""

    retryable = True

    def __init__(self, message: str, violation: str | None = None):
        super().__init__(message)
        self.violation = violation


class EmbeddingFailure(InterpretationError):
    """The embedding gateway failed for the validated interpretation."""

    retryable = True


class PersistenceFailure(InterpretationError):
    """The store could not be read or the transaction did not commit."""


class UniquenessConflict(InterpretationError):
    """An interpretation for the event was committed by another writer."""

    def __init__(self, event_id: str, cause: BaseException | None = None):
        super().__init__(f"Interpretation already exists for event: {event_id}", cause)
        self.event_id = event_id


__all__ = [
    "InterpretationError",
    "EventNotFound",
    "EmptyCompletion",
    "CompletionFailure",
    "InvalidCompletionFormat",
    "CompletionSchemaViolation",
    "EmbeddingFailure",
    "PersistenceFailure",
    "UniquenessConflict",
]
