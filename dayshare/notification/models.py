"""Data models for the notification blueprint."""

from __future__ import annotations

from enum import Enum
from typing import Any

from dayshare.core.types import FirestoreDocument

YOUR_TURN = "your_turn"
JOURNAL_PASSED = "journal_passed"
NEW_MEMBER = "new_member"
INVITATION_RECEIVED = "invitation_received"


class NotificationEvent(str, Enum):
    """State changes that fan out notifications."""

    ENTRY_CREATED = "entry_created"
    TURN_PASSED = "turn_passed"
    MEMBER_JOINED = "member_joined"
    INVITATION_SENT = "invitation_sent"


class Notification(FirestoreDocument, total=False):
    """A notification document in Firestore."""

    userId: str
    type: str
    title: str
    message: str
    groupId: str
    isRead: bool
    createdAt: Any
