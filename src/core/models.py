"""
Domain data structures for rooms, players and submissions.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.core.game_phases import GamePhase


@dataclass
class Player:
    """A seated player. The id is the Socket.IO session id."""
    id: str
    name: str
    is_host: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host
        }


@dataclass
class Submission:
    """An opaque drawing or slogan payload recorded for a player."""
    player_id: str
    payload: Any
    timestamp: float = field(default_factory=time.time)


@dataclass
class DirectoryEntry:
    """Session -> room back-reference kept in the PlayerDirectory."""
    player_id: str
    name: str
    is_host: bool
    room_code: str


@dataclass
class Room:
    """Room aggregate: roster in join order, host pointer, phase and submissions."""
    code: str
    host: str
    players: List[Player] = field(default_factory=list)
    game_state: GamePhase = GamePhase.WAITING
    drawings: List[Submission] = field(default_factory=list)
    slogans: List[Submission] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def player_count(self) -> int:
        return len(self.players)


@dataclass(frozen=True)
class RoomSnapshot:
    """Immutable copy of a room handed out of the registry lock."""
    code: str
    host: str
    players: List[Player]
    game_state: GamePhase
    drawing_count: int
    slogan_count: int
    created_at: float

    @classmethod
    def from_room(cls, room: Room) -> 'RoomSnapshot':
        return cls(
            code=room.code,
            host=room.host,
            players=[Player(p.id, p.name, p.is_host) for p in room.players],
            game_state=room.game_state,
            drawing_count=len(room.drawings),
            slogan_count=len(room.slogans),
            created_at=room.created_at
        )


@dataclass(frozen=True)
class Departure:
    """Outcome of removing a player from a room."""
    room_code: str
    player: Player
    new_host: Optional[Player] = None
    room_closed: bool = False


@dataclass(frozen=True)
class JoinResult:
    """Outcome of a successful create/join."""
    room: RoomSnapshot
    player: Player
    previous: Optional[Departure] = None


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of recording a drawing or slogan."""
    room_code: str
    player_name: str
    total: int
