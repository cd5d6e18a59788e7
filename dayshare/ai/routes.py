"""Routes for the AI blueprint."""

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request

from dayshare.auth.decorators import current_user_id, login_required

from . import bp
from .client import CompletionClient
from .forms import ChatForm
from .services import AIService


@bp.route("/chat", methods=["POST"])
@login_required
def chat() -> Any:
    """Send a message to the writing assistant."""
    form = ChatForm()
    form.validate_or_raise()

    db = firestore.client()
    reply = AIService.chat(
        db,
        current_user_id(),
        form.message.data,
        CompletionClient.from_config(current_app.config),
        group_id=form.groupId.data or None,
        context=form.context.data or None,
    )
    return jsonify(reply)


@bp.route("/chat", methods=["GET"])
@login_required(optional=True)
def get_chat_history() -> Any:
    """Return the caller's chat session, or null."""
    user_id = current_user_id()
    if not user_id:
        return jsonify(None)

    db = firestore.client()
    group_id = request.args.get("groupId") or None
    return jsonify(AIService.get_chat_history(db, user_id, group_id))


@bp.route("/chat", methods=["DELETE"])
@login_required
def clear_chat_history() -> Any:
    """Forget the caller's chat session."""
    db = firestore.client()
    group_id = request.args.get("groupId") or None
    AIService.clear_chat_history(db, current_user_id(), group_id)
    return jsonify({"success": True})
