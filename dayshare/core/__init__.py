"""Core module for the dayshare application."""

from .types import FirestoreDocument, UserSummary

__all__ = ["FirestoreDocument", "UserSummary"]
