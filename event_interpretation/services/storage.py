"""Persistence layer: MongoDB reads and the transactional interpretation write.

Interpretations live in their own collection with a unique index on
``event_id``. Content and embedding are written by two statements inside a
single multi-document transaction, so readers never observe one without the
other.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from ..clients.mongodb_client import get_database
from ..config import (
    EVENTS_COLLECTION,
    INTERPRETATIONS_COLLECTION,
    USERS_COLLECTION,
)
from ..errors import PersistenceFailure, UniquenessConflict
from ..models import EventRecord, InterpretationSource, UserContext
from ..utils.datetime_utils import get_current_timestamp

# Server error code for a write conflict between concurrent transactions
WRITE_CONFLICT_CODE: int = 112

logger = logging.getLogger(__name__)


def _id_candidates(value: str) -> List[Any]:
    """Return the ``_id`` values an opaque id may be stored under."""
    candidates: List[Any] = [value]
    if ObjectId.is_valid(value):
        candidates.insert(0, ObjectId(value))
    return candidates


class InterpretationStore:
    """Read events and users, create interpretations atomically."""

    def __init__(self, database: Database | None = None):
        self._db = database if database is not None else get_database()

    @property
    def events(self) -> Collection:
        return self._db[EVENTS_COLLECTION]

    @property
    def users(self) -> Collection:
        return self._db[USERS_COLLECTION]

    @property
    def interpretations(self) -> Collection:
        return self._db[INTERPRETATIONS_COLLECTION]

    def ensure_indexes(self) -> None:
        """Create the indexes the interpretation invariants depend on."""
        self.interpretations.create_index("event_id", unique=True, name="event_id_unique")
        self.interpretations.create_index("user_id", name="user_id")
        logger.info("Ensured indexes on %s", INTERPRETATIONS_COLLECTION)

    def find_interpretation_id(self, event_id: str) -> Optional[str]:
        """Return the id of the interpretation for *event_id*, if any."""
        try:
            doc = self.interpretations.find_one({"event_id": event_id}, {"_id": 1})
        except PyMongoError as exc:
            raise PersistenceFailure(
                f"Failed to look up interpretation for event: {event_id}", exc
            ) from exc
        return str(doc["_id"]) if doc else None

    def get_event(self, event_id: str) -> Optional[EventRecord]:
        """Load the fields of *event_id* that interpretation needs."""
        try:
            doc = self.events.find_one(
                {"_id": {"$in": _id_candidates(event_id)}},
                {"user_id": 1, "content": 1, "occurred_at": 1},
            )
        except PyMongoError as exc:
            raise PersistenceFailure(f"Failed to load event: {event_id}", exc) from exc
        if doc is None:
            return None

        user_id = doc.get("user_id")
        occurred_at = doc.get("occurred_at")
        if user_id is None or not isinstance(occurred_at, datetime):
            raise PersistenceFailure(
                f"Malformed event record {event_id}: user_id and a datetime occurred_at are required"
            )
        return EventRecord(
            id=event_id,
            user_id=str(user_id),
            content=doc.get("content") or "",
            occurred_at=occurred_at,
        )

    def get_user(self, user_id: str) -> UserContext:
        """Return the user's name and baseline, with defaults for gaps."""
        try:
            doc = self.users.find_one(
                {"_id": {"$in": _id_candidates(user_id)}},
                {"name": 1, "baseline": 1},
            )
        except PyMongoError as exc:
            raise PersistenceFailure(f"Failed to load user: {user_id}", exc) from exc

        defaults = UserContext()
        if doc is None:
            return defaults
        return UserContext(
            name=doc.get("name") or defaults.name,
            baseline=doc.get("baseline") or defaults.baseline,
        )

    def create_interpretation(
        self,
        *,
        user_id: str,
        event_id: str,
        content: str,
        embedding: Sequence[float],
        embedding_model: str,
        source: InterpretationSource = InterpretationSource.AUTOMATIC,
    ) -> str:
        """Insert the interpretation and its embedding in one transaction.

        Returns the generated interpretation id. Raises
        :class:`UniquenessConflict` when another writer already committed an
        interpretation for *event_id* and :class:`PersistenceFailure` for any
        other store error; in both cases nothing is written.

        The write runs under ``ClientSession.with_transaction``, which retries
        the callback on transient errors. A write conflict with a concurrent
        writer is therefore retried until that writer commits, at which point
        the insert fails with a duplicate key and the winner is readable.
        """
        created_at = get_current_timestamp()

        def _write(session: ClientSession) -> Any:
            document: Dict[str, Any] = {
                "user_id": user_id,
                "event_id": event_id,
                "content": content,
                "source": source.value,
                "created_at": created_at,
            }
            inserted = self.interpretations.insert_one(document, session=session)
            updated = self.interpretations.update_one(
                {"_id": inserted.inserted_id},
                {"$set": {"embedding": list(embedding), "embedding_model": embedding_model}},
                session=session,
            )
            if updated.matched_count != 1:
                raise PersistenceFailure(
                    f"Embedding write matched no interpretation: {inserted.inserted_id}"
                )
            return inserted.inserted_id

        try:
            with self._db.client.start_session() as session:
                interpretation_id = session.with_transaction(_write)
        except DuplicateKeyError as exc:
            raise UniquenessConflict(event_id, exc) from exc
        except OperationFailure as exc:
            if exc.code == WRITE_CONFLICT_CODE:
                raise UniquenessConflict(event_id, exc) from exc
            raise PersistenceFailure(
                f"Failed to store interpretation for event: {event_id}", exc
            ) from exc
        except PyMongoError as exc:
            raise PersistenceFailure(
                f"Failed to store interpretation for event: {event_id}", exc
            ) from exc

        logger.info("Stored interpretation %s for event %s", interpretation_id, event_id)
        return str(interpretation_id)

__all__ = ["InterpretationStore", "WRITE_CONFLICT_CODE"]
