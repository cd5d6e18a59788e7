"""Utility functions for the application."""

from __future__ import annotations

import datetime
import smtplib
from typing import TYPE_CHECKING, Any

from flask import current_app, render_template
from flask_mail import Message

from .core.constants import ANONYMOUS_NAME, USERS_COLLECTION
from .extensions import mail

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

SMTP_AUTH_ERROR_CODE = 534


class EmailError(Exception):
    """Base class for email errors."""

    pass


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: Any) -> datetime.datetime | None:
    """Coerce a stored timestamp into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
    if isinstance(value, (int, float)):
        # Millisecond epoch timestamps
        return datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
    return None


def display_name(user_data: dict[str, Any] | None, use_email: bool = False) -> str:
    """Return a user's display name, falling back to a neutral placeholder.

    The email address stands in for a missing name only when ``use_email`` is
    set, as in mail sent on the user's behalf.
    """
    if not user_data:
        return ANONYMOUS_NAME
    if use_email:
        return user_data.get("name") or user_data.get("email") or ANONYMOUS_NAME
    return user_data.get("name") or ANONYMOUS_NAME


def fetch_users(db: Client, user_ids: list[str]) -> dict[str, dict[str, Any]]:
    """Batch fetch user profiles and return a map by ID."""
    unique_ids = list(dict.fromkeys(uid for uid in user_ids if uid))
    if not unique_ids:
        return {}
    refs = [db.collection(USERS_COLLECTION).document(uid) for uid in unique_ids]
    return {
        doc.id: {**(doc.to_dict() or {}), "id": doc.id}
        for doc in db.get_all(refs)
        if doc.exists
    }


def user_summary(users: dict[str, dict[str, Any]], user_id: str) -> dict[str, Any] | None:
    """Return the public summary of a user, or None when the profile is missing."""
    data = users.get(user_id)
    if data is None:
        return None
    return {"id": user_id, "name": data.get("name")}


def send_email(to, subject, template, **kwargs):
    """Send an email to a recipient.

    Raises:
        EmailError: If sending the email fails.
    """
    msg = Message(
        subject,
        recipients=[to],
        html=render_template(template, **kwargs),
        sender=current_app.config["MAIL_DEFAULT_SENDER"],
    )
    try:
        mail.send(msg)
    except smtplib.SMTPAuthenticationError as e:
        if e.smtp_code == SMTP_AUTH_ERROR_CODE:
            raise EmailError(
                "Authentication failed. Google requires you to use an App Password. "
                "Please verify your MAIL_USERNAME and MAIL_PASSWORD settings."
            ) from e
        raise EmailError(f"SMTP Authentication failed: {e}") from e
    except Exception as e:
        raise EmailError(f"Failed to send email: {e}") from e
