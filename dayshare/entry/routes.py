"""Routes for the entry blueprint."""

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request

from dayshare.auth.decorators import current_user_id, login_required
from dayshare.core.constants import DEFAULT_ENTRIES_LIMIT
from dayshare.errors import ValidationError

from . import bp
from .forms import DraftForm, EntryForm, UploadForm
from .models import DraftSubmission, EntrySubmission
from .services import EntryService
from .utils import generate_upload_url


@bp.route("/groups/<string:group_id>/entries", methods=["POST"])
@login_required
def create_entry(group_id: str) -> Any:
    """Write the group's next entry; only the turn-holder may."""
    form = EntryForm()
    form.validate_or_raise()

    submission = EntrySubmission(
        group_id=group_id,
        content=form.content.data,
        title=(form.title.data or "").strip() or None,
        photos=form.photos.data or [],
        is_quick_reflection=bool(form.isQuickReflection.data),
        tags=form.tags.data or [],
    )
    db = firestore.client()
    advance = EntryService.create_entry(db, current_user_id(), submission)
    return jsonify({"entryId": advance.entry_id}), 201


@bp.route("/groups/<string:group_id>/entries", methods=["GET"])
@login_required(optional=True)
def get_group_entries(group_id: str) -> Any:
    """List a group's entries, newest first."""
    user_id = current_user_id()
    if not user_id:
        return jsonify([])

    limit = request.args.get("limit", DEFAULT_ENTRIES_LIMIT, type=int)
    db = firestore.client()
    entries = EntryService.get_group_entries(
        db,
        user_id,
        group_id,
        limit=limit,
        photo_ttl_minutes=current_app.config["PHOTO_URL_TTL_MINUTES"],
    )
    return jsonify(entries)


@bp.route("/groups/<string:group_id>/calendar", methods=["GET"])
@login_required(optional=True)
def get_entries_for_calendar(group_id: str) -> Any:
    """List a group's entries for one month of the calendar."""
    user_id = current_user_id()
    if not user_id:
        return jsonify([])

    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)
    if year is None or month is None:
        raise ValidationError("year and month are required.")

    db = firestore.client()
    entries = EntryService.get_entries_for_calendar(
        db,
        user_id,
        group_id,
        year,
        month,
        tz_name=current_app.config["CALENDAR_TIMEZONE"],
    )
    return jsonify(entries)


@bp.route("/groups/<string:group_id>/draft", methods=["PUT"])
@login_required
def save_draft(group_id: str) -> Any:
    """Autosave the caller's draft for a group."""
    form = DraftForm()
    form.validate_or_raise()

    submission = DraftSubmission(
        group_id=group_id,
        content=form.content.data or "",
        title=(form.title.data or "").strip() or None,
        photos=form.photos.data or [],
        is_quick_reflection=bool(form.isQuickReflection.data),
    )
    db = firestore.client()
    draft_id = EntryService.save_draft(db, current_user_id(), submission)
    return jsonify({"draftId": draft_id})


@bp.route("/groups/<string:group_id>/draft", methods=["GET"])
@login_required(optional=True)
def get_draft(group_id: str) -> Any:
    """Return the caller's draft for a group, or null."""
    user_id = current_user_id()
    if not user_id:
        return jsonify(None)

    db = firestore.client()
    return jsonify(EntryService.get_draft(db, user_id, group_id))


@bp.route("/entries/upload-url", methods=["POST"])
@login_required
def create_upload_url() -> Any:
    """Issue a signed URL the client uploads one photo to."""
    form = UploadForm()
    form.validate_or_raise()
    content_type = form.contentType.data or "image/jpeg"
    if not content_type.startswith("image/"):
        raise ValidationError("Only image uploads are supported.")
    return jsonify(generate_upload_url(current_user_id(), content_type))
