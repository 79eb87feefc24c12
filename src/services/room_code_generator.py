"""
Room Code Generator - produces short, human-typeable room identifiers.

Uniqueness is not guaranteed here; the RoomRegistry retries on collision
with a live room.
"""

import random
import string
from typing import Optional

from src.config.game_settings import get_game_settings

ROOM_CODE_ALPHABET = string.ascii_uppercase


class RoomCodeGenerator:
    """Generates room codes drawn uniformly from A-Z."""

    def __init__(self, length: Optional[int] = None, rng: Optional[random.Random] = None):
        self.length = length or get_game_settings().room_code_length
        self._rng = rng or random.Random()

    def generate(self) -> str:
        """Return a new random code, e.g. ``'QXBRTA'``."""
        return ''.join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(self.length))
