"""Deterministic simulation of the offline dinosaur runner, with a pygame front end."""

from .game_engine import GameEngine, GameState
from .trex import Trex, TrexStatus
from .horizon import Horizon

__all__ = ["GameEngine", "GameState", "Trex", "TrexStatus", "Horizon"]
