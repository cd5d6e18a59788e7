"""Who gets notified about what.

Kept free of Firestore so the rules can be checked against plain dicts.
"""

from __future__ import annotations

from typing import Any

from .models import (
    INVITATION_RECEIVED,
    JOURNAL_PASSED,
    NEW_MEMBER,
    YOUR_TURN,
    NotificationEvent,
)

TITLES = {
    YOUR_TURN: "Your Turn to Write",
    JOURNAL_PASSED: "New Entry Added",
    NEW_MEMBER: "New Member Joined",
    INVITATION_RECEIVED: "New Journal Invitation",
}


def notification_policy(
    event: NotificationEvent,
    group: dict[str, Any],
    actor: str,
    next_holder: str | None = None,
    invitee: str | None = None,
) -> list[tuple[str, str]]:
    """Return the ``(recipient, notification_type)`` pairs for an event.

    ``group`` is the group as it was before the event for MEMBER_JOINED, so
    its members are exactly the pre-existing ones.
    """
    members = group.get("members") or []

    if event == NotificationEvent.ENTRY_CREATED:
        plan = [(next_holder, YOUR_TURN)] if next_holder else []
        plan.extend(
            (member, JOURNAL_PASSED)
            for member in members
            if member not in (actor, next_holder)
        )
        return plan

    if event == NotificationEvent.TURN_PASSED:
        return [(next_holder, YOUR_TURN)] if next_holder else []

    if event == NotificationEvent.MEMBER_JOINED:
        return [(member, NEW_MEMBER) for member in members if member != actor]

    if event == NotificationEvent.INVITATION_SENT:
        if invitee and invitee != actor and invitee not in members:
            return [(invitee, INVITATION_RECEIVED)]
        return []

    raise ValueError(f"Unknown notification event: {event}")


def render_notification(
    event: NotificationEvent,
    notification_type: str,
    actor_name: str,
    group_name: str,
) -> tuple[str, str]:
    """Return the title and message shown for a notification."""
    title = TITLES[notification_type]
    if notification_type == YOUR_TURN:
        if event == NotificationEvent.TURN_PASSED:
            message = f"{actor_name} passed the journal to you in {group_name}"
        else:
            message = f"{actor_name} wrote in {group_name} and passed it to you"
    elif notification_type == JOURNAL_PASSED:
        message = f"{actor_name} wrote in {group_name}"
    elif notification_type == NEW_MEMBER:
        message = f"{actor_name} joined {group_name}"
    else:
        message = f"{actor_name} invited you to join {group_name}"
    return title, message
