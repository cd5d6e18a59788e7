"""Common utilities for tests."""

import unittest
import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and transactions."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq
        DocumentReference.__hash__ = lambda self: hash(tuple(self._path))

    # Transactions read through DocumentReference.get(transaction=...)
    if not hasattr(DocumentReference, "_orig_get"):
        DocumentReference._orig_get = DocumentReference.get

        def doc_ref_get(self: Any, transaction: Any = None) -> Any:
            """Handle transaction argument in get."""
            return self._orig_get()

        DocumentReference.get = doc_ref_get


class MockBatch:
    def __init__(self, db: Any) -> None:
        self.db = db
        self.writes: list[tuple[str, Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def update(self, ref: Any, data: Any) -> None:
        self.writes.append(("update", ref, data))

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.writes.append(("set", ref, data))

    def delete(self, ref: Any) -> None:
        self.writes.append(("delete", ref, None))

    def _real_commit(self) -> None:
        for op, ref, data in self.writes:
            if op == "delete":
                ref.delete()
            elif op == "set":
                ref.set(data)
            else:
                ref.update(data)


class MockTransaction:
    """A transaction whose writes land immediately."""

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        ref.set(data, merge=merge)

    def update(self, ref: Any, data: Any) -> None:
        ref.update(data)

    def delete(self, ref: Any) -> None:
        ref.delete()


def make_db() -> MockFirestore:
    """Return an in-memory Firestore with batch and transaction support."""
    patch_mockfirestore()
    db = MockFirestore()
    db.batch = lambda: MockBatch(db)
    db.transaction = lambda **kwargs: MockTransaction()
    return db


class FirestoreTestCase(unittest.TestCase):
    """Base test case running services against an in-memory Firestore."""

    def setUp(self) -> None:
        self.db = make_db()
        # Run transaction functions directly
        patcher = unittest.mock.patch(
            "firebase_admin.firestore.transactional", side_effect=lambda f: f
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def add_user(self, user_id: str, name: str, email: Optional[str] = None) -> None:
        self.db.collection("users").document(user_id).set(
            {"name": name, "email": email or f"{user_id}@example.com"}
        )

    def add_group(
        self,
        group_id: str,
        members: list[str],
        current_turn_index: int = 0,
        name: str = "Summer Diary",
    ) -> None:
        self.db.collection("groups").document(group_id).set(
            {
                "name": name,
                "createdBy": members[0],
                "members": list(members),
                "turnOrder": list(members),
                "currentTurnIndex": current_turn_index,
                "isActive": True,
            }
        )

    def group_data(self, group_id: str) -> dict[str, Any]:
        return self.db.collection("groups").document(group_id).get().to_dict()

    def notifications_for(self, user_id: str) -> list[dict[str, Any]]:
        docs = [doc.to_dict() or {} for doc in self.db.collection("notifications").stream()]
        return [data for data in docs if data.get("userId") == user_id]
