"""
Validation Service for T-Shirt Showdown

Checks the shape of inbound socket event data. Drawing and slogan payloads
are opaque and only checked for presence.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for input validation and normalization."""

    CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')

    MISSING_FIELD_ERRORS = {
        'playerName': (ErrorCode.MISSING_PLAYER_NAME, "Player name is required"),
        'roomCode': (ErrorCode.MISSING_ROOM_CODE, "Room code is required"),
    }

    def __init__(self, game_settings=None):
        self.game_settings = game_settings or get_game_settings()

    def validate_socket_data(self, data: Any, required_fields: Optional[List[str]] = None) -> Dict[str, Any]:
        """Require an object payload holding a non-null value for each of ``required_fields``."""
        if not isinstance(data, dict):
            raise ValidationError(ErrorCode.INVALID_DATA, "Invalid data format - expected an object")

        missing = [name for name in required_fields or [] if data.get(name) is None]
        if missing:
            code, message = self.MISSING_FIELD_ERRORS.get(
                missing[0], (ErrorCode.INVALID_DATA, f"Missing required field: {missing[0]}")
            )
            raise ValidationError(code, message)

        return data

    def validate_player_name(self, player_name: Any) -> str:
        """
        Validate and normalize a player name.

        Raises:
            ValidationError: If the name is missing, blank or too long
        """
        if not isinstance(player_name, str):
            raise ValidationError(ErrorCode.MISSING_PLAYER_NAME, "Player name is required")

        player_name = self.CONTROL_CHARS.sub('', player_name).strip()
        if not player_name:
            raise ValidationError(ErrorCode.MISSING_PLAYER_NAME, "Player name cannot be empty")

        max_length = self.game_settings.max_player_name_length
        if len(player_name) > max_length:
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TOO_LONG,
                f"Player name must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(player_name)}
            )

        return player_name

    def validate_room_code(self, room_code: Any) -> str:
        """
        Normalize a room code as typed by a player.

        Codes are case-insensitive; a well-formed but unknown code is left for
        the registry to reject with ROOM_NOT_FOUND.
        """
        if not isinstance(room_code, str) or not room_code.strip():
            raise ValidationError(ErrorCode.MISSING_ROOM_CODE, "Room code is required")

        return room_code.strip().upper()

    def validate_chat_message(self, message: Any) -> str:
        if not isinstance(message, str):
            raise ValidationError(ErrorCode.INVALID_DATA, "Message must be text")

        max_length = self.game_settings.max_chat_message_length
        if len(message) > max_length:
            raise ValidationError(
                ErrorCode.MESSAGE_TOO_LONG,
                f"Message must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(message)}
            )

        return message
