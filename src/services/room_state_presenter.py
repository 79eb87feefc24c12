"""
Room State Presenter - Centralized payload transformation for broadcasts.

This service provides canonical transformations from domain objects to the
camelCase payloads clients and the HTTP endpoints receive.
"""

import logging
from typing import Dict, Any, List

from src.core.models import JoinResult, Player, RoomSnapshot

logger = logging.getLogger(__name__)


class RoomStatePresenter:
    """Centralized service for transforming room state for clients."""

    def create_player_payload(self, player: Player) -> Dict[str, Any]:
        return player.to_dict()

    def create_player_list(self, room: RoomSnapshot) -> List[Dict[str, Any]]:
        """Roster in join order."""
        return [player.to_dict() for player in room.players]

    def create_room_created(self, result: JoinResult) -> Dict[str, Any]:
        return {
            'roomCode': result.room.code,
            'playerId': result.player.id
        }

    def create_room_joined(self, result: JoinResult) -> Dict[str, Any]:
        """Direct reply to a joiner: full roster plus their own id."""
        return {
            'roomCode': result.room.code,
            'players': self.create_player_list(result.room),
            'playerId': result.player.id
        }

    def create_room_summary(self, room: RoomSnapshot) -> Dict[str, Any]:
        return {
            'code': room.code,
            'players': len(room.players),
            'state': room.game_state.value
        }

    def create_health(self, room_count: int, player_count: int, uptime: float) -> Dict[str, Any]:
        """Payload for GET /health."""
        return {
            'status': 'online',
            'rooms': room_count,
            'players': player_count,
            'uptime': uptime
        }

    def create_stats(self, rooms: List[RoomSnapshot], player_count: int) -> Dict[str, Any]:
        """Payload for GET /stats."""
        return {
            'totalRooms': len(rooms),
            'totalPlayers': player_count,
            'activeRooms': [self.create_room_summary(room) for room in rooms]
        }
