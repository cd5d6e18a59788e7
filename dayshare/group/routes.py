"""Routes for the group blueprint."""

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, jsonify

from dayshare.auth.decorators import current_user_id, login_required
from dayshare.core.constants import INVITATIONS_COLLECTION
from dayshare.utils import display_name

from . import bp
from .forms import GroupForm, InviteByEmailForm, JoinGroupForm
from .services import GroupService
from .utils import send_invite_email_background


@bp.route("", methods=["GET"])
@login_required(optional=True)
def get_user_groups() -> Any:
    """List the caller's groups with whose turn it is in each."""
    user_id = current_user_id()
    if not user_id:
        return jsonify([])

    db = firestore.client()
    return jsonify(GroupService.get_user_groups(db, user_id))


@bp.route("", methods=["POST"])
@login_required
def create_group() -> Any:
    """Create a new group with the caller as its first member."""
    form = GroupForm()
    form.validate_or_raise()

    db = firestore.client()
    group_id = GroupService.create_group(
        db,
        current_user_id(),
        form.name.data.strip(),
        (form.description.data or "").strip() or None,
    )
    return jsonify({"groupId": group_id}), 201


@bp.route("/<string:group_id>/invites", methods=["POST"])
@login_required
def generate_invite_code(group_id: str) -> Any:
    """Create an invite code for an email address."""
    form = InviteByEmailForm()
    form.validate_or_raise()

    db = firestore.client()
    invitation = GroupService.generate_invite_code(
        db,
        group_id,
        current_user_id(),
        form.invitedEmail.data,
        ttl_days=current_app.config["INVITE_TTL_DAYS"],
    )

    if current_app.config.get("SEND_INVITE_EMAILS"):
        email_data = {
            "to": invitation["invitedEmail"],
            "subject": f"Join {invitation['groupName']} on DayShare!",
            "template": "email/group_invite.html",
            "inviter_name": display_name(g.user, use_email=True),
            "group_name": invitation["groupName"],
            "invite_code": invitation["inviteCode"],
            "expires_at": invitation["expiresAt"],
        }
        invite_ref = db.collection(INVITATIONS_COLLECTION).document(
            invitation["inviteCode"]
        )
        invite_ref.update({"emailStatus": "sending"})
        send_invite_email_background(
            current_app._get_current_object(),  # type: ignore[attr-defined]
            invitation["inviteCode"],
            email_data,
        )

    return jsonify({"inviteCode": invitation["inviteCode"]}), 201


@bp.route("/<string:group_id>/invites", methods=["GET"])
@login_required
def list_pending_invites(group_id: str) -> Any:
    """List the group's open invitations (creator only)."""
    db = firestore.client()
    return jsonify(GroupService.list_pending_invites(db, group_id, current_user_id()))


@bp.route("/join", methods=["POST"])
@login_required
def join_group_with_code() -> Any:
    """Join a group by redeeming an invite code."""
    form = JoinGroupForm()
    form.validate_or_raise()

    db = firestore.client()
    group_id = GroupService.join_group_with_code(
        db, form.inviteCode.data, current_user_id()
    )
    return jsonify({"success": True, "groupId": group_id})


@bp.route("/<string:group_id>/pass", methods=["POST"])
@login_required
def pass_turn(group_id: str) -> Any:
    """Pass the turn to the next member without writing."""
    db = firestore.client()
    advance = GroupService.pass_turn(db, group_id, current_user_id())
    return jsonify({"success": True, "currentTurnIndex": advance.next_index})
