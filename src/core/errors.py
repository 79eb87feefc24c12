"""
Core error definitions for T-Shirt Showdown

Provides error codes and the exception hierarchy raised by the room registry
and the socket handlers. Nothing here depends on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Input Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    MISSING_ROOM_CODE = "MISSING_ROOM_CODE"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"
    MESSAGE_TOO_LONG = "MESSAGE_TOO_LONG"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"

    # Room Management Errors
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"

    # Ignored without a reply
    UNAUTHORIZED = "UNAUTHORIZED"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RATE_LIMITED = "RATE_LIMITED"


class GameError(Exception):
    """Base class for errors reported back to the originating session."""

    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict] = None, code: Optional[ErrorCode] = None):
        if code is not None:
            self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(GameError):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        super().__init__(message, details, code=code)


class RoomNotFoundError(GameError):
    code = ErrorCode.ROOM_NOT_FOUND

    def __init__(self, room_code: str):
        super().__init__('Room not found!', {'roomCode': room_code})


class RoomFullError(GameError):
    code = ErrorCode.ROOM_FULL

    def __init__(self, room_code: str, max_players: int):
        super().__init__(
            f'Room is full! Maximum {max_players} players.',
            {'roomCode': room_code, 'maxPlayers': max_players}
        )


class NotEnoughPlayersError(GameError):
    code = ErrorCode.NOT_ENOUGH_PLAYERS

    def __init__(self, min_players: int):
        super().__init__(f'At least {min_players} players are needed to start!', {'minPlayers': min_players})
