"""Utility functions for the entry blueprint."""

from __future__ import annotations

import datetime
import logging
import uuid
from typing import Any
from zoneinfo import ZoneInfo

from firebase_admin import storage

from dayshare.core.constants import PHOTO_STORAGE_PREFIX, UPLOAD_URL_TTL_MINUTES
from dayshare.errors import ValidationError


def month_bounds(
    year: int, month: int, tz_name: str = "UTC"
) -> tuple[datetime.datetime, datetime.datetime]:
    """Return the UTC instants bounding a calendar month as ``[start, end)``.

    The month is taken in ``tz_name`` so an entry written late on the last
    evening of a month lands in that month for readers in that zone.
    """
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12.")
    if not 1 <= year <= 9998:
        raise ValidationError("year is out of range.")

    tz = ZoneInfo(tz_name)
    start = datetime.datetime(year, month, 1, tzinfo=tz)
    if month == 12:
        end = datetime.datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime.datetime(year, month + 1, 1, tzinfo=tz)
    return (
        start.astimezone(datetime.timezone.utc),
        end.astimezone(datetime.timezone.utc),
    )


def resolve_photo_urls(handles: list[str], ttl_minutes: int = 60) -> list[dict[str, Any]]:
    """Resolve stored photo handles to short-lived download URLs.

    A handle that cannot be signed keeps its place with ``url`` set to None.
    """
    if not handles:
        return []

    bucket = storage.bucket()
    expiration = datetime.timedelta(minutes=ttl_minutes)
    photos = []
    for handle in handles:
        try:
            url = bucket.blob(handle).generate_signed_url(
                expiration=expiration, version="v4", method="GET"
            )
        except Exception as e:
            logging.warning(f"Could not sign photo URL for {handle}: {e}")
            url = None
        photos.append({"id": handle, "url": url})
    return photos


def generate_upload_url(user_id: str, content_type: str = "image/jpeg") -> dict[str, str]:
    """Return a signed PUT URL and the storage handle the upload will land at."""
    handle = f"{PHOTO_STORAGE_PREFIX}/{user_id}/{uuid.uuid4().hex}"
    blob = storage.bucket().blob(handle)
    upload_url = blob.generate_signed_url(
        expiration=datetime.timedelta(minutes=UPLOAD_URL_TTL_MINUTES),
        method="PUT",
        content_type=content_type,
        version="v4",
    )
    return {"uploadUrl": upload_url, "storageId": handle}
