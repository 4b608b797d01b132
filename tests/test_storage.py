import unittest
from unittest.mock import MagicMock
from datetime import datetime, timezone
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from event_interpretation.errors import PersistenceFailure, UniquenessConflict
from event_interpretation.models import InterpretationSource
from event_interpretation.services import InterpretationStore
from event_interpretation.services.storage import WRITE_CONFLICT_CODE


class TestInterpretationStore(unittest.TestCase):

    def setUp(self):
        self.collections = {
            "events": MagicMock(name="events"),
            "users": MagicMock(name="users"),
            "interpretations": MagicMock(name="interpretations"),
        }
        self.mock_db = MagicMock()
        self.mock_db.__getitem__.side_effect = self.collections.__getitem__
        self.session = self.mock_db.client.start_session.return_value.__enter__.return_value
        self.transaction_outcomes = []
        self.session.with_transaction.side_effect = self._with_transaction

        self.interpretations = self.collections["interpretations"]
        self.inserted_id = ObjectId()
        self.interpretations.insert_one.return_value = MagicMock(inserted_id=self.inserted_id)
        self.interpretations.update_one.return_value = MagicMock(matched_count=1)

        self.store = InterpretationStore(self.mock_db)
        self.embedding = [0.25, -0.5, 0.75]

    def _with_transaction(self, callback):
        try:
            result = callback(self.session)
        except Exception as exc:
            self.transaction_outcomes.append(("aborted", type(exc)))
            raise
        self.transaction_outcomes.append(("committed", None))
        return result

    def _create(self):
        return self.store.create_interpretation(
            user_id="user-1",
            event_id="event-1",
            content="c" * 250,
            embedding=self.embedding,
            embedding_model="text-embedding-3-small",
        )

    def test_ensure_indexes_creates_unique_event_index(self):
        self.store.ensure_indexes()
        self.interpretations.create_index.assert_any_call("event_id", unique=True, name="event_id_unique")

    def test_find_interpretation_id(self):
        self.interpretations.find_one.return_value = {"_id": self.inserted_id}

        self.assertEqual(self.store.find_interpretation_id("event-1"), str(self.inserted_id))
        self.interpretations.find_one.assert_called_once_with({"event_id": "event-1"}, {"_id": 1})

    def test_find_interpretation_id_absent(self):
        self.interpretations.find_one.return_value = None
        self.assertIsNone(self.store.find_interpretation_id("event-1"))

    def test_find_interpretation_id_store_unreachable(self):
        self.interpretations.find_one.side_effect = ServerSelectionTimeoutError("no servers")

        with self.assertRaises(PersistenceFailure) as ctx:
            self.store.find_interpretation_id("event-1")
        self.assertIsInstance(ctx.exception.cause, ServerSelectionTimeoutError)

    def test_get_event_matches_object_id_or_string(self):
        event_oid = ObjectId()
        user_oid = ObjectId()
        occurred = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)
        self.collections["events"].find_one.return_value = {
            "_id": event_oid,
            "user_id": user_oid,
            "content": "Ran 5k",
            "occurred_at": occurred,
        }

        event = self.store.get_event(str(event_oid))

        self.assertEqual(event.id, str(event_oid))
        self.assertEqual(event.user_id, str(user_oid))
        self.assertEqual(event.content, "Ran 5k")
        self.assertEqual(event.occurred_at, occurred)
        query, projection = self.collections["events"].find_one.call_args[0]
        self.assertEqual(query, {"_id": {"$in": [event_oid, str(event_oid)]}})
        self.assertEqual(projection, {"user_id": 1, "content": 1, "occurred_at": 1})

    def test_get_event_opaque_string_id(self):
        self.collections["events"].find_one.return_value = None

        self.assertIsNone(self.store.get_event("evt_123"))
        query = self.collections["events"].find_one.call_args[0][0]
        self.assertEqual(query, {"_id": {"$in": ["evt_123"]}})

    def test_get_event_malformed_record(self):
        occurred = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)
        malformed = [
            {"_id": "evt_1", "content": "Ran 5k", "occurred_at": occurred},
            {"_id": "evt_1", "user_id": "user-1", "content": "Ran 5k"},
            {"_id": "evt_1", "user_id": "user-1", "content": "Ran 5k", "occurred_at": "2024-03-01"},
        ]
        for doc in malformed:
            with self.subTest(fields=sorted(doc)):
                self.collections["events"].find_one.return_value = doc
                with self.assertRaises(PersistenceFailure) as ctx:
                    self.store.get_event("evt_1")
                self.assertIn("Malformed event record evt_1", ctx.exception.message)

    def test_get_event_missing_content_is_empty(self):
        self.collections["events"].find_one.return_value = {
            "_id": "evt_1",
            "user_id": "user-1",
            "occurred_at": datetime(2024, 3, 1, tzinfo=timezone.utc),
        }

        self.assertEqual(self.store.get_event("evt_1").content, "")

    def test_get_user_defaults(self):
        self.collections["users"].find_one.return_value = {"_id": "user-1", "name": "Sam", "baseline": None}

        user = self.store.get_user("user-1")

        self.assertEqual(user.name, "Sam")
        self.assertEqual(user.baseline, "No baseline available yet.")

    def test_get_user_missing(self):
        self.collections["users"].find_one.return_value = None
        self.assertEqual(self.store.get_user("user-1").name, "User")

    def test_create_writes_row_then_vector_in_one_transaction(self):
        interpretation_id = self._create()

        self.assertEqual(interpretation_id, str(self.inserted_id))
        self.session.with_transaction.assert_called_once()

        document = self.interpretations.insert_one.call_args[0][0]
        self.assertEqual(document["event_id"], "event-1")
        self.assertEqual(document["user_id"], "user-1")
        self.assertEqual(document["source"], InterpretationSource.AUTOMATIC.value)
        self.assertNotIn("embedding", document)
        self.assertIs(self.interpretations.insert_one.call_args.kwargs["session"], self.session)

        self.interpretations.update_one.assert_called_once_with(
            {"_id": self.inserted_id},
            {"$set": {"embedding": self.embedding, "embedding_model": "text-embedding-3-small"}},
            session=self.session,
        )
        self.assertEqual(self.transaction_outcomes, [("committed", None)])

    def test_vector_write_failure_aborts_transaction(self):
        self.interpretations.update_one.side_effect = OperationFailure("disk full", code=14031)

        with self.assertRaises(PersistenceFailure):
            self._create()

        self.assertEqual(self.transaction_outcomes, [("aborted", OperationFailure)])
        self.mock_db.client.start_session.return_value.__exit__.assert_called_once()

    def test_vector_write_matching_nothing_aborts_transaction(self):
        self.interpretations.update_one.return_value = MagicMock(matched_count=0)

        with self.assertRaises(PersistenceFailure):
            self._create()

        self.assertEqual(self.transaction_outcomes, [("aborted", PersistenceFailure)])

    def test_duplicate_event_is_uniqueness_conflict(self):
        self.interpretations.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

        with self.assertRaises(UniquenessConflict) as ctx:
            self._create()
        self.assertEqual(ctx.exception.event_id, "event-1")
        self.interpretations.update_one.assert_not_called()

    def test_write_conflict_is_uniqueness_conflict(self):
        self.interpretations.insert_one.side_effect = OperationFailure(
            "WriteConflict", code=WRITE_CONFLICT_CODE
        )

        with self.assertRaises(UniquenessConflict):
            self._create()


if __name__ == '__main__':
    unittest.main()
