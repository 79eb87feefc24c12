"""
Room Registry for T-Shirt Showdown

Owns every live Room and the PlayerDirectory that points sessions at them.
All mutations of both structures happen under one re-entrant lock, so a
roster change and its directory update are never observable separately.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from src.config.game_settings import get_game_settings
from src.core.errors import (
    ErrorCode, GameError, NotEnoughPlayersError, RoomFullError, RoomNotFoundError, ValidationError
)
from src.core.game_phases import GamePhase
from src.core.models import (
    Departure, DirectoryEntry, JoinResult, Player, Room, RoomSnapshot, Submission, SubmissionResult
)
from src.services.player_directory import PlayerDirectory
from src.services.room_code_generator import RoomCodeGenerator

logger = logging.getLogger(__name__)


class RoomRegistry:
    """Maps room codes to Room aggregates with thread-safe operations."""

    def __init__(self, code_generator: Optional[RoomCodeGenerator] = None,
                 directory: Optional[PlayerDirectory] = None, game_settings=None):
        self.code_generator = code_generator or RoomCodeGenerator()
        self.directory = directory if directory is not None else PlayerDirectory()
        self.game_settings = game_settings or get_game_settings()
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.RLock()
        self._room_closed_listeners: List[Callable[[str], Any]] = []

    def add_room_closed_listener(self, listener: Callable[[str], Any]) -> None:
        """Register a callback invoked (under the lock) with the code of every destroyed room."""
        self._room_closed_listeners.append(listener)

    # Room lifecycle

    def create_room(self, host_name: str, player_id: str) -> JoinResult:
        """
        Create a new room with a single host player.

        If the session is already seated somewhere it leaves that room once a
        code has been allocated; a failed allocation leaves it seated.

        Args:
            host_name: Display name of the host
            player_id: Session id of the host

        Returns:
            JoinResult with the new room snapshot, the host player and the
            departure from a previous room (if any)
        """
        with self._lock:
            code = self._allocate_code()
            previous = self._remove_player_locked(player_id)

            host = Player(id=player_id, name=host_name, is_host=True)
            room = Room(code=code, host=player_id, players=[host])
            self._rooms[code] = room
            self.directory.put(player_id, DirectoryEntry(player_id, host_name, True, code))

            logger.info(f"Room {code} created by {host_name} ({player_id})")
            return JoinResult(room=RoomSnapshot.from_room(room), player=Player(host.id, host.name, True),
                              previous=previous)

    def _allocate_code(self) -> str:
        attempts = self.game_settings.room_code_max_attempts
        for _ in range(attempts):
            code = self.code_generator.generate()
            if code not in self._rooms:
                return code
            logger.warning(f"Room code collision on {code}, regenerating")
        raise GameError(f'Could not allocate a room code after {attempts} attempts')

    def _close_room_locked(self, code: str) -> None:
        del self._rooms[code]
        logger.info(f"Room {code} closed")
        for listener in self._room_closed_listeners:
            try:
                listener(code)
            except Exception as e:
                logger.error(f"Error in room closed listener for {code}: {e}")

    def room_exists(self, code: str) -> bool:
        return code in self._rooms

    def get_room_snapshot(self, code: str) -> Optional[RoomSnapshot]:
        """
        Get a copy of a room's current state.

        Args:
            code: Room code

        Returns:
            RoomSnapshot or None if the room doesn't exist
        """
        with self._lock:
            room = self._rooms.get(code)
            return RoomSnapshot.from_room(room) if room else None

    def summarize_rooms(self) -> List[RoomSnapshot]:
        with self._lock:
            return [RoomSnapshot.from_room(room) for room in self._rooms.values()]

    def room_count(self) -> int:
        return len(self._rooms)

    def player_count(self) -> int:
        return self.directory.count()

    # Player management

    def join_room(self, code: str, player_name: str, player_id: str) -> JoinResult:
        """
        Add a non-host player to an existing room.

        Args:
            code: Room code to join
            player_name: Display name for the player
            player_id: Session id of the player

        Returns:
            JoinResult with the roster snapshot (joiner included) and the new player

        Raises:
            RoomNotFoundError: If no live room has this code
            RoomFullError: If the roster is already at capacity
            ValidationError: If the session is already in this room
        """
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                raise RoomNotFoundError(code)

            if room.find_player(player_id):
                raise ValidationError(ErrorCode.ALREADY_IN_ROOM, 'You are already in this room.')

            max_players = self.game_settings.max_players_per_room
            if room.player_count >= max_players:
                raise RoomFullError(code, max_players)

            previous = self._remove_player_locked(player_id)

            player = Player(id=player_id, name=player_name, is_host=False)
            room.players.append(player)
            self.directory.put(player_id, DirectoryEntry(player_id, player_name, False, code))

            logger.info(f"{player_name} ({player_id}) joined room {code} ({room.player_count} players)")
            return JoinResult(room=RoomSnapshot.from_room(room), player=Player(player.id, player.name, False),
                              previous=previous)

    def remove_player(self, player_id: str) -> Optional[Departure]:
        """
        Remove a player from its room, migrating host or closing the room as needed.

        Args:
            player_id: Session id of the player to remove

        Returns:
            Departure describing what happened, or None if the player was not seated
        """
        with self._lock:
            return self._remove_player_locked(player_id)

    def _remove_player_locked(self, player_id: str) -> Optional[Departure]:
        entry = self.directory.remove(player_id)
        if entry is None:
            return None

        room = self._rooms.get(entry.room_code)
        if room is None:
            logger.warning(f"Directory pointed {player_id} at missing room {entry.room_code}")
            return None

        room.players = [p for p in room.players if p.id != player_id]
        departed = Player(player_id, entry.name, entry.is_host)

        if not room.players:
            self._close_room_locked(room.code)
            return Departure(room_code=room.code, player=departed, room_closed=True)

        new_host = None
        if room.host == player_id:
            successor = room.players[0]
            successor.is_host = True
            room.host = successor.id
            successor_entry = self.directory.get(successor.id)
            if successor_entry:
                successor_entry.is_host = True
            new_host = Player(successor.id, successor.name, True)
            logger.info(f"Host of room {room.code} passed from {departed.name} to {successor.name}")

        logger.info(f"{departed.name} ({player_id}) left room {room.code} ({room.player_count} players)")
        return Departure(room_code=room.code, player=departed, new_host=new_host)

    # Game flow

    def start_game(self, code: str, requester_id: str) -> bool:
        """
        Move a waiting room into the starting phase.

        Args:
            code: Room code
            requester_id: Session id asking to start

        Returns:
            True if the room entered the starting phase, False if the request
            was ignored (unknown room, requester not host, game already running)

        Raises:
            NotEnoughPlayersError: If the roster is below the minimum
        """
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                logger.debug(f"Ignoring startGame for unknown room {code}")
                return False

            if room.host != requester_id:
                logger.debug(f"Ignoring startGame from non-host {requester_id} in room {code} "
                             f"({ErrorCode.UNAUTHORIZED.value})")
                return False

            min_players = self.game_settings.min_players_required
            if room.player_count < min_players:
                raise NotEnoughPlayersError(min_players)

            if room.game_state != GamePhase.WAITING:
                logger.debug(f"Ignoring startGame in room {code}: already {room.game_state.value}")
                return False

            room.game_state = GamePhase.STARTING
            logger.info(f"Game starting in room {code} with {room.player_count} players")
            return True

    def set_phase(self, code: str, phase: GamePhase) -> bool:
        """
        Set a room's game phase.

        Returns:
            True if updated, False if the room doesn't exist
        """
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                return False
            room.game_state = phase
            logger.info(f"Room {code} entered phase {phase.value}")
            return True

    def abort_start(self, code: str) -> bool:
        """Return a room stuck in the starting phase to waiting. False if it was not starting."""
        with self._lock:
            room = self._rooms.get(code)
            if room is None or room.game_state != GamePhase.STARTING:
                return False
            room.game_state = GamePhase.WAITING
            return True

    def record_drawing(self, player_id: str, payload: Any) -> Optional[SubmissionResult]:
        """Append a drawing for the player's room. None if the player or room is unknown."""
        return self._record_submission(player_id, payload, 'drawings')

    def record_slogan(self, player_id: str, payload: Any) -> Optional[SubmissionResult]:
        """Append a slogan for the player's room. None if the player or room is unknown."""
        return self._record_submission(player_id, payload, 'slogans')

    def _record_submission(self, player_id: str, payload: Any, collection: str) -> Optional[SubmissionResult]:
        with self._lock:
            entry = self.directory.get(player_id)
            if entry is None:
                logger.debug(f"Ignoring submission from {player_id} ({ErrorCode.UNKNOWN_PLAYER.value})")
                return None

            room = self._rooms.get(entry.room_code)
            if room is None:
                logger.debug(f"Ignoring submission for missing room {entry.room_code}")
                return None

            submissions = getattr(room, collection)
            submissions.append(Submission(player_id=player_id, payload=payload))
            logger.debug(f"{entry.name} submitted to {collection} in room {room.code} ({len(submissions)} total)")
            return SubmissionResult(room_code=room.code, player_name=entry.name, total=len(submissions))

    def lookup_player(self, player_id: str) -> Optional[DirectoryEntry]:
        """Copy of the directory entry for a session, or None."""
        with self._lock:
            entry = self.directory.get(player_id)
            if entry is None:
                return None
            return DirectoryEntry(entry.player_id, entry.name, entry.is_host, entry.room_code)

    def clear(self) -> None:
        """Drop every room and directory entry (tests and shutdown)."""
        with self._lock:
            for code in list(self._rooms):
                self._close_room_locked(code)
            self.directory.clear()
