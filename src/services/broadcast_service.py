"""
Broadcast Service - Centralized Socket.IO message broadcasting.

This service handles all Socket.IO emissions in a centralized way:
- Room-wide broadcasts
- Countdown and phase notifications
- Roster change notifications
"""

import logging
from datetime import datetime
from typing import Dict, Any, Optional

from src.core.models import Player
from src.services.room_state_presenter import RoomStatePresenter

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, room_state_presenter: Optional[RoomStatePresenter] = None):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            room_state_presenter: Payload builder (defaults to a new presenter)
        """
        self.socketio = socketio
        self.room_state_presenter = room_state_presenter or RoomStatePresenter()

    # Core emission methods

    def emit_to_room(self, event: str, data: Dict[str, Any], room_code: str, skip_sid: Optional[str] = None):
        """Emit an event to all sessions in a room, optionally excluding one."""
        try:
            if skip_sid:
                self.socketio.emit(event, data, room=room_code, skip_sid=skip_sid)
            else:
                self.socketio.emit(event, data, room=room_code)
            logger.debug(f'Emitted {event} to room {room_code}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {room_code}: {e}')

    # Roster broadcasts

    def broadcast_player_joined(self, room_code: str, player: Player):
        """Tell existing members about a new player; the joiner is skipped."""
        self.emit_to_room('playerJoined', {
            'player': self.room_state_presenter.create_player_payload(player)
        }, room_code, skip_sid=player.id)

    def broadcast_new_host(self, room_code: str, player: Player):
        self.emit_to_room('newHost', {
            'player': self.room_state_presenter.create_player_payload(player)
        }, room_code)

    def broadcast_player_left(self, room_code: str, player_id: str):
        self.emit_to_room('playerLeft', {'playerId': player_id}, room_code)

    # Game flow broadcasts

    def broadcast_game_starting(self, room_code: str, countdown: int):
        self.emit_to_room('gameStarting', {'countdown': countdown}, room_code)

    def broadcast_countdown_update(self, room_code: str, countdown: int):
        self.emit_to_room('countdownUpdate', {'countdown': countdown}, room_code)

    def broadcast_phase_update(self, room_code: str, phase: str, timer: int):
        self.emit_to_room('phaseUpdate', {'phase': phase, 'timer': timer}, room_code)
        logger.info(f'Room {room_code} phase update: {phase} ({timer}s)')

    def broadcast_drawing_received(self, room_code: str, player_name: str, total: int):
        """Progress notice only; the drawing itself is never re-broadcast."""
        self.emit_to_room('drawingReceived', {'player': player_name, 'total': total}, room_code)

    def broadcast_slogan_received(self, room_code: str, player_name: str, total: int):
        self.emit_to_room('sloganReceived', {'player': player_name, 'total': total}, room_code)

    def broadcast_chat_message(self, room_code: str, player_name: str, message: str,
                               sent_at: Optional[datetime] = None):
        """Relay a chat line to the whole room, sender included."""
        sent_at = sent_at or datetime.now()
        self.emit_to_room('chatMessage', {
            'player': player_name,
            'message': message,
            'time': sent_at.strftime('%H:%M')
        }, room_code)
