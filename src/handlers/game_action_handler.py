"""
Game Action Handler

This module handles Socket.IO events related to game actions: starting the
game, submitting drawings and slogans, and room chat.

Events from sessions that are not seated (late events racing a disconnect)
and start requests from non-hosts are ignored without a reply.
"""

import logging
from flask import request

from src.services.error_response_factory import with_error_handling
from src.services.rate_limit_service import prevent_event_overflow
from .base_handler import BaseGameHandler

logger = logging.getLogger(__name__)


class GameActionHandler(BaseGameHandler):
    """Handler for game action operations."""

    @prevent_event_overflow('startGame')
    @with_error_handling
    def handle_start_game(self, data):
        """
        Handle the host's request to start the game.

        Expected data format:
        {
            'roomCode': 'ABCDEF'
        }
        """
        self.log_handler_start('handle_start_game', data)

        data = self.validation_service.validate_socket_data(data)
        room_code = data.get('roomCode')
        if not isinstance(room_code, str):
            logger.debug(f'Ignoring startGame without a room code from {request.sid}')
            return
        room_code = room_code.strip().upper()

        # Raises NotEnoughPlayersError; unknown room or non-host returns False
        if not self.room_registry.start_game(room_code, request.sid):
            return

        self.phase_scheduler.start_countdown(room_code)
        self.log_handler_success('handle_start_game', f'Countdown started in room {room_code}')

    @prevent_event_overflow('submitDrawing')
    @with_error_handling
    def handle_submit_drawing(self, data):
        """
        Record a drawing and broadcast the submission count.

        Expected data format:
        {
            'drawing': <opaque payload>
        }
        """
        self.log_handler_start('handle_submit_drawing')

        data = self.validation_service.validate_socket_data(data, ['drawing'])
        result = self.room_registry.record_drawing(request.sid, data['drawing'])
        if result is None:
            return

        self.broadcast_service.broadcast_drawing_received(result.room_code, result.player_name, result.total)

    @prevent_event_overflow('submitSlogan')
    @with_error_handling
    def handle_submit_slogan(self, data):
        """
        Record a slogan and broadcast the submission count.

        Expected data format:
        {
            'slogan': <opaque payload>
        }
        """
        self.log_handler_start('handle_submit_slogan')

        data = self.validation_service.validate_socket_data(data, ['slogan'])
        result = self.room_registry.record_slogan(request.sid, data['slogan'])
        if result is None:
            return

        self.broadcast_service.broadcast_slogan_received(result.room_code, result.player_name, result.total)

    @prevent_event_overflow('chatMessage')
    @with_error_handling
    def handle_chat_message(self, data):
        """
        Relay a chat message to the sender's room, sender included.

        Expected data format:
        {
            'message': 'text'
        }
        """
        self.log_handler_start('handle_chat_message', data)

        data = self.validation_service.validate_socket_data(data, ['message'])
        message = self.validation_service.validate_chat_message(data['message'])

        entry = self.room_registry.lookup_player(request.sid)
        if entry is None:
            logger.debug(f'Ignoring chat from unseated client {request.sid}')
            return

        self.broadcast_service.broadcast_chat_message(entry.room_code, entry.name, message)
