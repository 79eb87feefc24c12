"""
Room Connection Handler

This module handles Socket.IO events that seat a session in a room:
creating a room and joining one by code.
"""

import logging
from flask import request

from src.services.error_response_factory import with_error_handling
from src.services.rate_limit_service import prevent_event_overflow
from .base_handler import BaseRoomHandler

logger = logging.getLogger(__name__)


class RoomConnectionHandler(BaseRoomHandler):
    """Handler for createRoom and joinRoom."""

    @prevent_event_overflow('createRoom')
    @with_error_handling
    def handle_create_room(self, data):
        """
        Handle a player creating a new room and becoming its host.

        Expected data format:
        {
            'playerName': 'display_name'
        }
        """
        self.log_handler_start('handle_create_room', data)

        player_name = self.validate_create_room_data(data)

        result = self.room_registry.create_room(player_name, request.sid)
        self.announce_departure(result.previous)

        room_code = result.room.code
        self.join_socketio_room(room_code)

        self.reply('roomCreated', self.room_state_presenter.create_room_created(result))

        self.log_handler_success('handle_create_room', f'Room {room_code} created by {player_name}')

    @prevent_event_overflow('joinRoom')
    @with_error_handling
    def handle_join_room(self, data):
        """
        Handle a player joining an existing room.

        Expected data format:
        {
            'roomCode': 'ABCDEF',
            'playerName': 'display_name'
        }

        The joiner receives ``roomJoined`` with the full roster; everyone
        already in the room receives ``playerJoined``.
        """
        self.log_handler_start('handle_join_room', data)

        room_code, player_name = self.validate_join_room_data(data)

        # Raises RoomNotFoundError / RoomFullError, reported to this client only
        result = self.room_registry.join_room(room_code, player_name, request.sid)
        self.announce_departure(result.previous)

        self.join_socketio_room(room_code)

        self.reply('roomJoined', self.room_state_presenter.create_room_joined(result))
        self.broadcast_service.broadcast_player_joined(room_code, result.player)

        self.log_handler_success(
            'handle_join_room',
            f'Player {player_name} joined room {room_code} ({len(result.room.players)} players)'
        )
