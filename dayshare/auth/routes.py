"""Routes for the auth blueprint."""

from firebase_admin import auth, firestore
from flask import current_app, g, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from dayshare.core.constants import USERS_COLLECTION
from dayshare.errors import ValidationError
from dayshare.extensions import csrf

from . import bp
from .decorators import login_required


@bp.route("/session_login", methods=["POST"])
@csrf.exempt
def session_login():
    """
    This endpoint is called from the client-side after a successful Firebase login.
    It receives the ID token, verifies it, and creates a server-side session.
    """
    payload = request.get_json(silent=True) or {}
    id_token = payload.get("idToken")
    if not id_token:
        raise ValidationError("idToken is required.")

    try:
        decoded_token = auth.verify_id_token(id_token)
    except Exception as e:
        current_app.logger.error(f"Error during session login: {e}")
        return (
            jsonify({"error": "unauthenticated", "message": "Invalid token."}),
            401,
        )

    uid = decoded_token["uid"]
    db = firestore.client()
    profile = {"email": decoded_token.get("email")}
    if decoded_token.get("name"):
        profile["name"] = decoded_token["name"]
    db.collection(USERS_COLLECTION).document(uid).set(profile, merge=True)

    session.clear()
    session["user_id"] = uid
    return jsonify({"status": "success", "userId": uid})


@bp.route("/logout", methods=["POST"])
def logout():
    """
    The actual logout is handled by the Firebase client-side SDK.
    This route clears the server-side session.
    """
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    """Return the logged-in user's profile."""
    user = g.user or {}
    return jsonify(
        {"id": session["user_id"], "name": user.get("name"), "email": user.get("email")}
    )


@bp.route("/csrf_token", methods=["GET"])
def csrf_token():
    """Hand the client a CSRF token to send back in the X-CSRFToken header."""
    return jsonify({"token": generate_csrf()})
