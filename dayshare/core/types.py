"""Core data types for the dayshare application."""

from typing import Any, Optional, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    path: str
    updatedAt: Any


class UserSummary(TypedDict):
    """The public slice of a user profile attached to other documents."""

    id: str
    name: Optional[str]  # noqa: UP007
