"""The entry blueprint: journal entries, drafts and photo uploads."""

from flask import Blueprint

bp = Blueprint("entry", __name__)

from . import routes  # noqa: E402

__all__ = ["routes"]
