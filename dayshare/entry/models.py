"""Data models for the entry blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from dayshare.core.constants import PHOTO_STORAGE_PREFIX
from dayshare.core.types import FirestoreDocument, UserSummary
from dayshare.errors import ValidationError

MAX_PHOTOS = 10
MAX_TAGS = 20
MAX_TAG_LENGTH = 50


class Entry(FirestoreDocument, total=False):
    """A journal entry document in Firestore."""

    groupId: str
    authorId: str
    title: str
    content: str
    photos: list[str]
    entryDate: Any
    turnIndex: int
    isQuickReflection: bool
    tags: list[str]

    # UI and calculated fields
    author: UserSummary | None


class Draft(FirestoreDocument, total=False):
    """A draft document in Firestore, one per group and author."""

    groupId: str
    authorId: str
    title: str
    content: str
    photos: list[str]
    isQuickReflection: bool


def _validate_photos(photos: list[str]) -> None:
    if len(photos) > MAX_PHOTOS:
        raise ValidationError(f"An entry can hold at most {MAX_PHOTOS} photos.")
    for handle in photos:
        if not handle.startswith(f"{PHOTO_STORAGE_PREFIX}/"):
            raise ValidationError("Photos must be uploaded through DayShare.")


@dataclass
class DraftSubmission:
    """Dataclass for a draft save."""

    group_id: str
    content: str = ""
    title: Optional[str] = None
    photos: list[str] = field(default_factory=list)
    is_quick_reflection: bool = False

    def validate(self) -> None:
        """Validate the draft for obvious errors."""
        _validate_photos(self.photos)

    def to_document(self, author_id: str) -> dict[str, Any]:
        """Return the Firestore fields this draft overwrites."""
        return {
            "groupId": self.group_id,
            "authorId": author_id,
            "title": self.title,
            "content": self.content,
            "photos": list(self.photos),
            "isQuickReflection": self.is_quick_reflection,
        }


@dataclass
class EntrySubmission(DraftSubmission):
    """Dataclass for an entry submission."""

    tags: list[str] = field(default_factory=list)

    def validate(self) -> None:
        """Validate the entry for obvious errors."""
        if not self.content.strip():
            raise ValidationError("An entry needs some content.")
        _validate_photos(self.photos)
        if len(self.tags) > MAX_TAGS:
            raise ValidationError(f"An entry can have at most {MAX_TAGS} tags.")
        if any(len(tag) > MAX_TAG_LENGTH for tag in self.tags):
            raise ValidationError(f"Tags are limited to {MAX_TAG_LENGTH} characters.")

    def to_document(self, author_id: str) -> dict[str, Any]:
        """Return the Firestore fields of the new entry, minus its timestamps."""
        data = super().to_document(author_id)
        data["tags"] = list(dict.fromkeys(self.tags))
        return data
