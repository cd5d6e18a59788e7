"""Utility functions for the group blueprint."""

import logging
import secrets
import threading

from firebase_admin import firestore

from dayshare.core.constants import (
    INVITATIONS_COLLECTION,
    INVITE_CODE_ALPHABET,
    INVITE_CODE_LENGTH,
)
from dayshare.utils import send_email


def make_invite_code(length=INVITE_CODE_LENGTH):
    """Return a random lower-case alphanumeric invite code."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def send_invite_email_background(app, invite_code, email_data):
    """Send an invite email in a background thread."""

    def task():
        with app.app_context():
            db = firestore.client()
            invite_ref = db.collection(INVITATIONS_COLLECTION).document(invite_code)
            try:
                send_email(**email_data)
                invite_ref.update(
                    {"emailStatus": "sent", "lastError": firestore.DELETE_FIELD}
                )
            except Exception as e:
                logging.error(f"Invite email for {invite_code} failed: {e}")
                invite_ref.update({"emailStatus": "failed", "lastError": str(e)})

    thread = threading.Thread(target=task)
    thread.start()
    return thread
