"""The AI blueprint: the writing-assistant chat."""

from flask import Blueprint

bp = Blueprint("ai", __name__, url_prefix="/ai")

from . import routes  # noqa: E402

__all__ = ["routes"]
