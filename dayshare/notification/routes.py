"""Routes for the notification blueprint."""

from typing import Any

from firebase_admin import firestore
from flask import jsonify, request

from dayshare.auth.decorators import current_user_id, login_required
from dayshare.core.constants import DEFAULT_NOTIFICATIONS_LIMIT

from . import bp
from .services import NotificationService


@bp.route("", methods=["GET"])
@login_required(optional=True)
def get_user_notifications() -> Any:
    """List the caller's notifications, newest first."""
    user_id = current_user_id()
    if not user_id:
        return jsonify([])

    limit = request.args.get("limit", DEFAULT_NOTIFICATIONS_LIMIT, type=int)
    db = firestore.client()
    notifications = NotificationService.get_user_notifications(
        db, user_id, limit=limit
    )
    return jsonify(notifications)


@bp.route("/unread-count", methods=["GET"])
@login_required(optional=True)
def get_unread_count() -> Any:
    """Count the caller's unread notifications."""
    user_id = current_user_id()
    if not user_id:
        return jsonify({"count": 0})

    db = firestore.client()
    return jsonify({"count": NotificationService.get_unread_count(db, user_id)})


@bp.route("/<string:notification_id>/read", methods=["POST"])
@login_required(optional=True)
def mark_as_read(notification_id: str) -> Any:
    """Mark a single notification as read."""
    user_id = current_user_id()
    if not user_id:
        return jsonify({"success": False})

    db = firestore.client()
    NotificationService.mark_as_read(db, user_id, notification_id)
    return jsonify({"success": True})


@bp.route("/read-all", methods=["POST"])
@login_required(optional=True)
def mark_all_as_read() -> Any:
    """Mark all of the caller's notifications as read."""
    user_id = current_user_id()
    if not user_id:
        return jsonify({"success": False, "updated": 0})

    db = firestore.client()
    updated = NotificationService.mark_all_as_read(db, user_id)
    return jsonify({"success": True, "updated": updated})
