"""
Game Phase Enumeration

Defines the game timeline states stored on every room.
"""

from enum import Enum


class GamePhase(Enum):
    """Game phase enumeration."""
    WAITING = "waiting"
    STARTING = "starting"  # countdown running, drawing pending
    DRAWING = "drawing"
    CAPTIONING = "captioning"
    RESULTS = "results"
