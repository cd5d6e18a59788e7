"""Service layer for notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from dayshare.core.constants import (
    DEFAULT_NOTIFICATIONS_LIMIT,
    FIRESTORE_BATCH_LIMIT,
    MAX_NOTIFICATIONS_LIMIT,
    NOTIFICATIONS_COLLECTION,
)
from dayshare.errors import NotificationNotFound
from dayshare.utils import display_name, fetch_users, utcnow

from .models import Notification, NotificationEvent
from .policy import notification_policy, render_notification

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates notifications for state changes and serves a user's inbox."""

    @staticmethod
    def build_notifications(
        db: Client,
        event: NotificationEvent,
        group: dict[str, Any],
        actor_id: str,
        next_holder: str | None = None,
        invitee_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Turn the policy's recipients into notification documents."""
        plan = notification_policy(
            event, group, actor_id, next_holder=next_holder, invitee=invitee_id
        )
        if not plan:
            return []

        actor_name = display_name(fetch_users(db, [actor_id]).get(actor_id))
        group_name = group.get("name") or "your group"
        now = utcnow()

        notifications = []
        for recipient, notification_type in plan:
            title, message = render_notification(
                event, notification_type, actor_name, group_name
            )
            notifications.append(
                {
                    "userId": recipient,
                    "type": notification_type,
                    "title": title,
                    "message": message,
                    "groupId": group.get("id"),
                    "isRead": False,
                    "createdAt": now,
                }
            )
        return notifications

    @staticmethod
    def deliver(db: Client, notifications: list[dict[str, Any]]) -> None:
        """Write notification documents in batches."""
        collection = db.collection(NOTIFICATIONS_COLLECTION)
        for i in range(0, len(notifications), FIRESTORE_BATCH_LIMIT):
            batch = db.batch()
            for data in notifications[i : i + FIRESTORE_BATCH_LIMIT]:
                batch.set(collection.document(), data)
            batch.commit()

    @staticmethod
    def fanout(
        db: Client,
        event: NotificationEvent,
        group: dict[str, Any],
        actor_id: str,
        next_holder: str | None = None,
        invitee_id: str | None = None,
    ) -> bool:
        """Notify everyone affected by an already-committed state change.

        Failures are logged and reported through the return value; they never
        propagate, so the triggering write always stands.
        """
        try:
            notifications = NotificationService.build_notifications(
                db,
                event,
                group,
                actor_id,
                next_holder=next_holder,
                invitee_id=invitee_id,
            )
            if notifications:
                NotificationService.deliver(db, notifications)
        except Exception as e:
            logger.error(
                f"Notification fanout failed for {event.value} "
                f"in group {group.get('id')}: {e}"
            )
            return False
        return True

    @staticmethod
    def get_user_notifications(
        db: Client, user_id: str, limit: int = DEFAULT_NOTIFICATIONS_LIMIT
    ) -> list[Notification]:
        """Fetch a user's notifications, newest first."""
        limit = max(1, min(int(limit), MAX_NOTIFICATIONS_LIMIT))
        query = (
            db.collection(NOTIFICATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [{**doc.to_dict(), "id": doc.id} for doc in query.stream()]

    @staticmethod
    def _unread_docs(db: Client, user_id: str) -> list[Any]:
        query = (
            db.collection(NOTIFICATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .where(filter=firestore.FieldFilter("isRead", "==", False))
        )
        return list(query.stream())

    @staticmethod
    def get_unread_count(db: Client, user_id: str) -> int:
        """Count a user's unread notifications."""
        return len(NotificationService._unread_docs(db, user_id))

    @staticmethod
    def mark_as_read(db: Client, user_id: str, notification_id: str) -> None:
        """Mark one of the user's notifications as read."""
        ref = db.collection(NOTIFICATIONS_COLLECTION).document(notification_id)
        doc = ref.get()
        if not doc.exists or (doc.to_dict() or {}).get("userId") != user_id:
            raise NotificationNotFound()
        ref.update({"isRead": True})

    @staticmethod
    def mark_all_as_read(db: Client, user_id: str) -> int:
        """Mark every unread notification of the user as read."""
        unread = NotificationService._unread_docs(db, user_id)
        for i in range(0, len(unread), FIRESTORE_BATCH_LIMIT):
            batch = db.batch()
            for doc in unread[i : i + FIRESTORE_BATCH_LIMIT]:
                batch.update(doc.reference, {"isRead": True})
            batch.commit()
        return len(unread)
