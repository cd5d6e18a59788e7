"""Service layer for journal entries and drafts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from dayshare.core.constants import (
    DEFAULT_ENTRIES_LIMIT,
    DRAFTS_COLLECTION,
    ENTRIES_COLLECTION,
    MAX_ENTRIES_LIMIT,
)
from dayshare.errors import NotAMember
from dayshare.group.services import GroupService
from dayshare.notification.models import NotificationEvent
from dayshare.notification.services import NotificationService
from dayshare.turns import TurnAdvance, TurnService
from dayshare.utils import fetch_users, user_summary, utcnow

from .models import Draft, DraftSubmission, Entry, EntrySubmission
from .utils import month_bounds, resolve_photo_urls

if TYPE_CHECKING:
    import datetime

    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def draft_id(group_id: str, user_id: str) -> str:
    """Return the document ID of a user's draft for a group."""
    return f"{group_id}_{user_id}"


class EntryService:
    """Service class for entry-related operations."""

    @staticmethod
    def create_entry(
        db: Client,
        user_id: str,
        submission: EntrySubmission,
        now: datetime.datetime | None = None,
    ) -> TurnAdvance:
        """Write an entry as the current turn-holder and pass the journal on.

        The entry and the pointer move commit together. Notifications and
        clearing the author's draft happen afterwards and never undo the
        entry.
        """
        submission.validate()
        now = now or utcnow()
        entry_data = {
            **submission.to_document(user_id),
            "entryDate": now,
            "createdAt": now,
        }
        advance = TurnService.submit_entry(db, submission.group_id, user_id, entry_data)

        NotificationService.fanout(
            db,
            NotificationEvent.ENTRY_CREATED,
            advance.group,
            user_id,
            next_holder=advance.next_holder,
        )
        EntryService._discard_draft(db, submission.group_id, user_id)
        return advance

    @staticmethod
    def _discard_draft(db: Client, group_id: str, user_id: str) -> None:
        try:
            db.collection(DRAFTS_COLLECTION).document(draft_id(group_id, user_id)).delete()
        except Exception as e:
            logger.warning(f"Could not clear draft for {user_id} in {group_id}: {e}")

    @staticmethod
    def save_draft(db: Client, user_id: str, submission: DraftSubmission) -> str:
        """Save the caller's single draft for a group, replacing any earlier one."""
        submission.validate()
        group = GroupService.get_group(db, submission.group_id)
        if user_id not in (group.get("members") or []):
            raise NotAMember()

        doc_id = draft_id(submission.group_id, user_id)
        db.collection(DRAFTS_COLLECTION).document(doc_id).set(
            {**submission.to_document(user_id), "updatedAt": utcnow()}
        )
        return doc_id

    @staticmethod
    def get_draft(db: Client, user_id: str, group_id: str) -> Draft | None:
        """Return the caller's draft for a group, or None."""
        doc = db.collection(DRAFTS_COLLECTION).document(draft_id(group_id, user_id)).get()
        if not doc.exists:
            return None
        return {**(doc.to_dict() or {}), "id": doc.id}

    @staticmethod
    def _enrich(
        db: Client, entry_docs: list[Any], photo_ttl_minutes: int | None
    ) -> list[Entry]:
        """Attach author summaries and, when asked, resolved photo URLs."""
        entries = [{**doc.to_dict(), "id": doc.id} for doc in entry_docs]
        users = fetch_users(db, [e.get("authorId") for e in entries])
        for entry in entries:
            entry["author"] = user_summary(users, entry.get("authorId"))
            if photo_ttl_minutes is not None:
                entry["photos"] = resolve_photo_urls(
                    entry.get("photos") or [], photo_ttl_minutes
                )
        return entries

    @staticmethod
    def get_group_entries(
        db: Client,
        user_id: str,
        group_id: str,
        limit: int = DEFAULT_ENTRIES_LIMIT,
        photo_ttl_minutes: int = 60,
    ) -> list[Entry]:
        """Return a group's newest entries first; empty for non-members."""
        if GroupService.get_membership(db, group_id, user_id) is None:
            return []

        limit = max(1, min(int(limit), MAX_ENTRIES_LIMIT))
        query = (
            db.collection(ENTRIES_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .order_by("entryDate", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return EntryService._enrich(db, list(query.stream()), photo_ttl_minutes)

    @staticmethod
    def get_entries_for_calendar(
        db: Client,
        user_id: str,
        group_id: str,
        year: int,
        month: int,
        tz_name: str = "UTC",
    ) -> list[Entry]:
        """Return a group's entries dated within one calendar month, oldest first."""
        start, end = month_bounds(year, month, tz_name)
        if GroupService.get_membership(db, group_id, user_id) is None:
            return []

        query = (
            db.collection(ENTRIES_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("entryDate", ">=", start))
            .where(filter=firestore.FieldFilter("entryDate", "<", end))
            .order_by("entryDate")
        )
        return EntryService._enrich(db, list(query.stream()), None)
