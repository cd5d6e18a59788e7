"""Service layer for turn rotation.

A group's ``turnOrder`` lists its members in join order and
``currentTurnIndex`` points at the member whose turn it is. The pointer only
moves through :meth:`TurnService.rotate_turn`, which runs the membership and
turn-holder checks and the pointer write inside a single Firestore
transaction, so two concurrent writers cannot both pass the check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from dayshare.core.constants import ENTRIES_COLLECTION, GROUPS_COLLECTION
from dayshare.errors import GroupNotFound, NotAMember, NotYourTurn
from dayshare.utils import utcnow

from .models import TurnAdvance

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


def _pointer(group: dict[str, Any]) -> int:
    """Return the stored pointer folded back into range."""
    turn_order = group.get("turnOrder") or []
    if not turn_order:
        return 0
    return int(group.get("currentTurnIndex") or 0) % len(turn_order)


def current_holder(group: dict[str, Any]) -> str | None:
    """Return the uid whose turn it is, or None for an empty turn order."""
    turn_order = group.get("turnOrder") or []
    if not turn_order:
        return None
    return turn_order[_pointer(group)]


def next_turn_index(group: dict[str, Any]) -> int:
    """Return the pointer value after one step of rotation."""
    turn_order = group.get("turnOrder") or []
    if not turn_order:
        return 0
    return (_pointer(group) + 1) % len(turn_order)


class TurnService:
    """Gatekeeps journal writes and advances the turn pointer."""

    @staticmethod
    def check_turn(group: dict[str, Any], user_id: str) -> None:
        """Raise unless ``user_id`` is a member holding the current turn."""
        if user_id not in (group.get("members") or []):
            raise NotAMember()
        if current_holder(group) != user_id:
            raise NotYourTurn()

    @staticmethod
    def _rotate_turn_transaction(
        transaction: Transaction,
        group_ref: DocumentReference,
        user_id: str,
        entry_ref: DocumentReference | None = None,
        entry_data: dict[str, Any] | None = None,
    ) -> TurnAdvance:
        """Validate the caller, optionally write the entry and advance the pointer."""
        snapshot = group_ref.get(transaction=transaction)
        if not snapshot.exists:
            raise GroupNotFound()

        group = snapshot.to_dict() or {}
        TurnService.check_turn(group, user_id)

        previous_index = _pointer(group)
        next_index = next_turn_index(group)
        next_holder = group["turnOrder"][next_index]

        if entry_ref is not None and entry_data is not None:
            transaction.set(entry_ref, {**entry_data, "turnIndex": previous_index})

        transaction.update(
            group_ref, {"currentTurnIndex": next_index, "updatedAt": utcnow()}
        )

        group["id"] = snapshot.id
        group["currentTurnIndex"] = next_index
        return TurnAdvance(
            group_id=snapshot.id,
            previous_index=previous_index,
            next_index=next_index,
            previous_holder=user_id,
            next_holder=next_holder,
            group=group,
            entry_id=entry_ref.id if entry_ref is not None else None,
        )

    @staticmethod
    def rotate_turn(
        db: Client,
        group_id: str,
        user_id: str,
        entry_data: dict[str, Any] | None = None,
    ) -> TurnAdvance:
        """Run the validated turn transition in a transaction.

        With ``entry_data`` the entry is written in the same transaction,
        stamped with the pointer value it was written under.
        """
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)
        entry_ref = None
        if entry_data is not None:
            entry_ref = db.collection(ENTRIES_COLLECTION).document()

        rotate = firestore.transactional(TurnService._rotate_turn_transaction)
        return rotate(db.transaction(), group_ref, user_id, entry_ref, entry_data)

    @staticmethod
    def pass_turn(db: Client, group_id: str, user_id: str) -> TurnAdvance:
        """Skip writing and hand the journal to the next member."""
        return TurnService.rotate_turn(db, group_id, user_id)

    @staticmethod
    def submit_entry(
        db: Client, group_id: str, user_id: str, entry_data: dict[str, Any]
    ) -> TurnAdvance:
        """Write an entry and hand the journal to the next member."""
        return TurnService.rotate_turn(db, group_id, user_id, entry_data)
