"""Turn rotation: whose turn it is to write in a group, and moving it along."""

from .models import TurnAdvance
from .services import TurnService, current_holder, next_turn_index

__all__ = ["TurnAdvance", "TurnService", "current_holder", "next_turn_index"]
