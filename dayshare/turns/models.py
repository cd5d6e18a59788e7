"""Data models for turn rotation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TurnAdvance:
    """The outcome of a successful turn transition, as committed to Firestore."""

    group_id: str
    previous_index: int
    next_index: int
    previous_holder: str
    next_holder: str
    group: dict[str, Any]
    entry_id: Optional[str] = None
