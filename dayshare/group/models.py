"""Data models for the group blueprint."""

from __future__ import annotations

from typing import Any

from dayshare.core.types import FirestoreDocument, UserSummary

INVITE_PENDING = "pending"
INVITE_ACCEPTED = "accepted"
INVITE_DECLINED = "declined"


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    description: str
    createdBy: str
    # Member uids; listings replace them with user summaries
    members: list[Any]
    turnOrder: list[str]
    currentTurnIndex: int
    isActive: bool

    # UI and calculated fields
    currentTurnUser: UserSummary | None
    isMyTurn: bool
    latestEntry: dict[str, Any] | None


class Invitation(FirestoreDocument, total=False):
    """An invitation document in Firestore, keyed by its invite code."""

    groupId: str
    invitedBy: str
    invitedEmail: str
    inviteCode: str
    status: str
    expiresAt: Any
    acceptedBy: str
    acceptedAt: Any
    emailStatus: str
    lastError: str
