"""Service layer for group operations: membership, invitations and turns."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from dayshare.core.constants import (
    ENTRIES_COLLECTION,
    GROUPS_COLLECTION,
    INVITATIONS_COLLECTION,
    INVITE_CODE_MAX_ATTEMPTS,
    INVITE_TTL_DAYS,
    USERS_COLLECTION,
)
from dayshare.errors import (
    AlreadyMember,
    GroupNotFound,
    InvitationAlreadyUsed,
    InvitationExpired,
    InvitationNotFound,
    InviteCodeCollision,
    NotGroupCreator,
)
from dayshare.notification.models import NotificationEvent
from dayshare.notification.services import NotificationService
from dayshare.turns import TurnAdvance, TurnService, current_holder
from dayshare.utils import as_utc, fetch_users, user_summary, utcnow

from .models import INVITE_ACCEPTED, INVITE_PENDING, Group, Invitation
from .utils import make_invite_code

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def create_group(
        db: Client, user_id: str, name: str, description: str | None = None
    ) -> str:
        """Create a group whose only member, and first turn-holder, is its creator."""
        group_data = {
            "name": name,
            "description": description,
            "createdBy": user_id,
            "members": [user_id],
            "turnOrder": [user_id],
            "currentTurnIndex": 0,
            "isActive": True,
            "createdAt": utcnow(),
        }
        _, group_ref = db.collection(GROUPS_COLLECTION).add(group_data)
        return str(group_ref.id)

    @staticmethod
    def get_group(db: Client, group_id: str) -> Group:
        """Fetch a group or raise GroupNotFound."""
        doc = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not doc.exists:
            raise GroupNotFound()
        return {**(doc.to_dict() or {}), "id": doc.id}

    @staticmethod
    def get_membership(db: Client, group_id: str, user_id: str) -> dict[str, Any] | None:
        """Return the group if the user belongs to it, otherwise None."""
        doc = db.collection(GROUPS_COLLECTION).document(group_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        if user_id not in (data.get("members") or []):
            return None
        return {**data, "id": doc.id}

    @staticmethod
    def _latest_entry(db: Client, group_id: str) -> dict[str, Any] | None:
        query = (
            db.collection(ENTRIES_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .order_by("entryDate", direction=firestore.Query.DESCENDING)
            .limit(1)
        )
        for doc in query.stream():
            return {**doc.to_dict(), "id": doc.id}
        return None

    @staticmethod
    def get_user_groups(db: Client, user_id: str) -> list[Group]:
        """Fetch the user's groups with their turn-holder, members and latest entry."""
        query = db.collection(GROUPS_COLLECTION).where(
            filter=firestore.FieldFilter("members", "array_contains", user_id)
        )
        group_docs = list(query.stream())

        member_ids: list[str] = []
        for doc in group_docs:
            member_ids.extend(doc.to_dict().get("members") or [])
        users = fetch_users(db, member_ids)

        groups = []
        for doc in group_docs:
            group = {**doc.to_dict(), "id": doc.id}
            holder = current_holder(group)
            group["currentTurnUser"] = user_summary(users, holder) if holder else None
            group["isMyTurn"] = holder == user_id
            group["members"] = [
                summary
                for member in group.get("members") or []
                if (summary := user_summary(users, member))
            ]
            group["latestEntry"] = GroupService._latest_entry(db, doc.id)
            groups.append(group)
        return groups

    @staticmethod
    def _find_user_by_email(db: Client, email: str) -> str | None:
        query = (
            db.collection(USERS_COLLECTION)
            .where(filter=firestore.FieldFilter("email", "==", email))
            .limit(1)
        )
        for doc in query.stream():
            return doc.id
        return None

    @staticmethod
    def _reserve_invite_code_transaction(
        transaction: Transaction, invite_ref: DocumentReference, invite_data: dict[str, Any]
    ) -> bool:
        """Claim an invite code unless a document already uses it."""
        snapshot = invite_ref.get(transaction=transaction)
        if snapshot.exists:
            return False
        transaction.set(invite_ref, invite_data)
        return True

    @staticmethod
    def generate_invite_code(
        db: Client,
        group_id: str,
        inviter_id: str,
        invited_email: str,
        ttl_days: int = INVITE_TTL_DAYS,
        now: datetime.datetime | None = None,
    ) -> Invitation:
        """Create a pending invitation; only the group's creator may invite."""
        group = GroupService.get_group(db, group_id)
        if group.get("createdBy") != inviter_id:
            raise NotGroupCreator()

        now = now or utcnow()
        email = invited_email.strip().lower()
        invite_data = {
            "groupId": group_id,
            "invitedBy": inviter_id,
            "invitedEmail": email,
            "status": INVITE_PENDING,
            "expiresAt": now + datetime.timedelta(days=ttl_days),
            "createdAt": now,
        }

        reserve = firestore.transactional(GroupService._reserve_invite_code_transaction)
        for _ in range(INVITE_CODE_MAX_ATTEMPTS):
            code = make_invite_code()
            invite_ref = db.collection(INVITATIONS_COLLECTION).document(code)
            invitation = {**invite_data, "inviteCode": code}
            if reserve(db.transaction(), invite_ref, invitation):
                break
        else:
            raise InviteCodeCollision()

        invitee_id = GroupService._find_user_by_email(db, email)
        NotificationService.fanout(
            db,
            NotificationEvent.INVITATION_SENT,
            group,
            inviter_id,
            invitee_id=invitee_id,
        )
        return {**invitation, "id": code, "groupName": group.get("name")}

    @staticmethod
    def list_pending_invites(
        db: Client,
        group_id: str,
        user_id: str,
        now: datetime.datetime | None = None,
    ) -> list[Invitation]:
        """List a group's pending, unexpired invitations for its creator."""
        group = GroupService.get_group(db, group_id)
        if group.get("createdBy") != user_id:
            raise NotGroupCreator("Only the group creator can view invitations.")

        now = now or utcnow()
        query = (
            db.collection(INVITATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("status", "==", INVITE_PENDING))
        )
        invites = []
        for doc in query.stream():
            data = doc.to_dict()
            expires_at = as_utc(data.get("expiresAt"))
            if expires_at and now < expires_at:
                invites.append({**data, "id": doc.id})

        invites.sort(key=lambda x: as_utc(x.get("createdAt")) or now, reverse=True)
        return invites

    @staticmethod
    def _join_group_transaction(
        transaction: Transaction,
        db: Client,
        invite_ref: DocumentReference,
        user_id: str,
        now: datetime.datetime,
    ) -> dict[str, Any]:
        """Validate the invitation and append the user to the group."""
        invite_snapshot = invite_ref.get(transaction=transaction)
        if not invite_snapshot.exists:
            raise InvitationNotFound()

        invitation = invite_snapshot.to_dict() or {}
        if invitation.get("status") != INVITE_PENDING:
            raise InvitationAlreadyUsed()

        expires_at = as_utc(invitation.get("expiresAt"))
        if expires_at is None or now >= expires_at:
            raise InvitationExpired()

        group_ref = db.collection(GROUPS_COLLECTION).document(invitation["groupId"])
        group_snapshot = group_ref.get(transaction=transaction)
        if not group_snapshot.exists:
            raise GroupNotFound()

        group = group_snapshot.to_dict() or {}
        members = list(group.get("members") or [])
        if user_id in members:
            raise AlreadyMember()

        turn_order = list(group.get("turnOrder") or [])
        transaction.update(
            group_ref,
            {
                "members": members + [user_id],
                "turnOrder": turn_order + [user_id],
                "updatedAt": now,
            },
        )
        transaction.update(
            invite_ref,
            {"status": INVITE_ACCEPTED, "acceptedBy": user_id, "acceptedAt": now},
        )
        return {**group, "id": group_snapshot.id}

    @staticmethod
    def join_group_with_code(
        db: Client,
        invite_code: str,
        user_id: str,
        now: datetime.datetime | None = None,
    ) -> str:
        """Redeem an invite code and return the joined group's ID.

        The joiner goes to the end of the turn order straight away, even in
        the middle of a round; the pointer is left where it is.
        """
        now = now or utcnow()
        invite_ref = db.collection(INVITATIONS_COLLECTION).document(
            invite_code.strip().lower()
        )
        join = firestore.transactional(GroupService._join_group_transaction)
        group_before = join(db.transaction(), db, invite_ref, user_id, now)

        NotificationService.fanout(
            db, NotificationEvent.MEMBER_JOINED, group_before, user_id
        )
        return group_before["id"]

    @staticmethod
    def pass_turn(db: Client, group_id: str, user_id: str) -> TurnAdvance:
        """Hand the journal to the next member without writing."""
        advance = TurnService.pass_turn(db, group_id, user_id)
        NotificationService.fanout(
            db,
            NotificationEvent.TURN_PASSED,
            advance.group,
            user_id,
            next_holder=advance.next_holder,
        )
        return advance
