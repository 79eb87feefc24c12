"""
Base Handler Classes

This module provides base classes for Socket.IO handlers with common patterns
for service access, validation, room membership and response emission.
"""

import logging
from typing import Any, Dict, Optional
from flask import request
from flask_socketio import emit, join_room, leave_room

from container import get_container
from src.core.models import Departure

logger = logging.getLogger(__name__)


class BaseHandler:
    """Socket.IO handler with container-backed access to the room services."""

    def __init__(self):
        self._container = get_container()

    @property
    def room_registry(self):
        return self._container.get('RoomRegistry')

    @property
    def phase_scheduler(self):
        return self._container.get('PhaseScheduler')

    @property
    def validation_service(self):
        return self._container.get('ValidationService')

    @property
    def broadcast_service(self):
        return self._container.get('BroadcastService')

    @property
    def room_state_presenter(self):
        return self._container.get('RoomStatePresenter')

    def reply(self, event_name: str, data: Dict[str, Any]) -> None:
        """Emit an event to the requesting client only."""
        emit(event_name, data)

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        logger.info(f'{handler_name} from {request.sid}')
        if data:
            logger.debug(f'{handler_name} payload: {data}')

    def log_handler_success(self, handler_name: str, message: str) -> None:
        logger.info(f'{handler_name} done for {request.sid}: {message}')


class RoomHandlerMixin:
    """
    Mixin for handlers that change room membership.

    Provides joining/leaving Socket.IO rooms and announcing departures.
    """

    broadcast_service: Any

    def join_socketio_room(self, room_code: str) -> None:
        """Join a Socket.IO room for broadcasting."""
        join_room(room_code)
        logger.debug(f'Client {request.sid} joined Socket.IO room: {room_code}')

    def leave_socketio_room(self, room_code: str) -> None:
        """Leave a Socket.IO room."""
        leave_room(room_code)
        logger.debug(f'Client {request.sid} left Socket.IO room: {room_code}')

    def announce_departure(self, departure: Optional[Departure], leave_socketio_room: bool = True) -> None:
        """
        Broadcast the effects of a player leaving a room.

        Host migration is announced before the departure itself. A closed
        room has nobody left to tell.

        Args:
            departure: Result of RoomRegistry.remove_player, may be None
            leave_socketio_room: Also remove the current client from the
                Socket.IO room (not needed on disconnect)
        """
        if departure is None:
            return

        if leave_socketio_room:
            self.leave_socketio_room(departure.room_code)

        if departure.room_closed:
            return

        if departure.new_host:
            self.broadcast_service.broadcast_new_host(departure.room_code, departure.new_host)
        self.broadcast_service.broadcast_player_left(departure.room_code, departure.player.id)


class ValidationHandlerMixin:
    """
    Mixin for handlers that need common validation patterns.
    """

    validation_service: Any

    def validate_create_room_data(self, data: Any) -> str:
        """
        Validate createRoom data and extract the player name.

        Raises:
            ValidationError: If validation fails
        """
        validated = self.validation_service.validate_socket_data(data, ['playerName'])
        return self.validation_service.validate_player_name(validated['playerName'])

    def validate_join_room_data(self, data: Any) -> tuple:
        """
        Validate joinRoom data and extract (room_code, player_name).

        Raises:
            ValidationError: If validation fails
        """
        validated = self.validation_service.validate_socket_data(data, ['roomCode', 'playerName'])
        room_code = self.validation_service.validate_room_code(validated['roomCode'])
        player_name = self.validation_service.validate_player_name(validated['playerName'])
        return room_code, player_name


class BaseRoomHandler(BaseHandler, RoomHandlerMixin, ValidationHandlerMixin):
    """Base class for handlers that deal with room membership."""
    pass


class BaseGameHandler(BaseHandler, ValidationHandlerMixin):
    """Base class for handlers that deal with game actions."""
    pass
