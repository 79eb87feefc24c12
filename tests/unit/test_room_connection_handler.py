"""
Room Connection Handler Unit Tests

Tests for createRoom and joinRoom handling with mocked services. Handler
methods are called unwrapped so the rate limit and error decorators stay out
of the way; errors therefore surface as exceptions.
"""

import inspect
import pytest
from unittest.mock import Mock, patch
from flask import Flask

from src.core.errors import ErrorCode, RoomFullError, RoomNotFoundError, ValidationError
from src.core.game_phases import GamePhase
from src.core.models import Departure, JoinResult, Player, RoomSnapshot
from src.handlers.base_handler import BaseRoomHandler
from src.handlers.room_connection_handler import RoomConnectionHandler
from src.services.room_state_presenter import RoomStatePresenter
from src.services.validation_service import ValidationService


def snapshot(code, players):
    return RoomSnapshot(code=code, host=players[0].id, players=players, game_state=GamePhase.WAITING,
                        drawing_count=0, slogan_count=0, created_at=0.0)


class TestRoomConnectionHandler:

    def setup_method(self):
        with patch('src.handlers.base_handler.get_container') as mock_get_container:
            self.mock_container = Mock()
            mock_get_container.return_value = self.mock_container
            self.handler = RoomConnectionHandler()

        self.mock_registry = Mock()
        self.mock_broadcast_service = Mock()
        services = {
            'RoomRegistry': self.mock_registry,
            'BroadcastService': self.mock_broadcast_service,
            'ValidationService': ValidationService(),
            'RoomStatePresenter': RoomStatePresenter()
        }
        self.mock_container.get.side_effect = lambda name: services[name]

        self.app = Flask(__name__)
        self.request_context = self.app.test_request_context()
        self.request_context.push()

        self.patches = [
            patch('src.handlers.room_connection_handler.request'),
            patch('src.handlers.base_handler.request'),
            patch('src.handlers.base_handler.emit'),
            patch('src.handlers.base_handler.join_room'),
            patch('src.handlers.base_handler.leave_room'),
        ]
        (self.mock_request, self.mock_base_request, self.mock_emit,
         self.mock_join_room, self.mock_leave_room) = [p.start() for p in self.patches]
        self.mock_request.sid = 'sid-a'
        self.mock_base_request.sid = 'sid-a'

    def teardown_method(self):
        for p in self.patches:
            p.stop()
        self.request_context.pop()

    def call(self, method_name, data):
        method = inspect.unwrap(getattr(RoomConnectionHandler, method_name))
        return method(self.handler, data)

    def test_inheritance(self):
        assert isinstance(self.handler, BaseRoomHandler)
        assert self.handler._container is self.mock_container

    def test_create_room(self):
        host = Player('sid-a', 'Alice', True)
        self.mock_registry.create_room.return_value = JoinResult(room=snapshot('ROOM01', [host]), player=host)

        self.call('handle_create_room', {'playerName': '  Alice '})

        self.mock_registry.create_room.assert_called_once_with('Alice', 'sid-a')
        self.mock_join_room.assert_called_once_with('ROOM01')
        self.mock_emit.assert_called_once_with('roomCreated', {'roomCode': 'ROOM01', 'playerId': 'sid-a'})
        self.mock_leave_room.assert_not_called()

    def test_create_room_requires_name(self):
        with pytest.raises(ValidationError) as exc_info:
            self.call('handle_create_room', {})

        assert exc_info.value.code == ErrorCode.MISSING_PLAYER_NAME
        self.mock_registry.create_room.assert_not_called()

    def test_create_room_announces_previous_departure(self):
        host = Player('sid-a', 'Alice', True)
        previous = Departure(room_code='OLD001', player=Player('sid-a', 'Alice', True),
                             new_host=Player('sid-b', 'Bob', True))
        self.mock_registry.create_room.return_value = JoinResult(
            room=snapshot('ROOM01', [host]), player=host, previous=previous)

        self.call('handle_create_room', {'playerName': 'Alice'})

        self.mock_leave_room.assert_called_once_with('OLD001')
        self.mock_broadcast_service.broadcast_new_host.assert_called_once_with('OLD001', previous.new_host)
        self.mock_broadcast_service.broadcast_player_left.assert_called_once_with('OLD001', 'sid-a')

    def test_join_room(self):
        host = Player('sid-h', 'Host', True)
        joiner = Player('sid-a', 'Alice', False)
        self.mock_registry.join_room.return_value = JoinResult(room=snapshot('ROOM01', [host, joiner]),
                                                               player=joiner)

        self.call('handle_join_room', {'roomCode': 'room01', 'playerName': 'Alice'})

        self.mock_registry.join_room.assert_called_once_with('ROOM01', 'Alice', 'sid-a')
        self.mock_join_room.assert_called_once_with('ROOM01')
        self.mock_emit.assert_called_once_with('roomJoined', {
            'roomCode': 'ROOM01',
            'players': [host.to_dict(), joiner.to_dict()],
            'playerId': 'sid-a'
        })
        self.mock_broadcast_service.broadcast_player_joined.assert_called_once_with('ROOM01', joiner)

    def test_join_room_errors_propagate_without_side_effects(self):
        for error in [RoomNotFoundError('ROOM01'), RoomFullError('ROOM01', 8)]:
            self.mock_registry.join_room.side_effect = error

            with pytest.raises(type(error)):
                self.call('handle_join_room', {'roomCode': 'ROOM01', 'playerName': 'Alice'})

        self.mock_join_room.assert_not_called()
        self.mock_emit.assert_not_called()
        self.mock_broadcast_service.broadcast_player_joined.assert_not_called()

    def test_join_room_requires_code(self):
        with pytest.raises(ValidationError) as exc_info:
            self.call('handle_join_room', {'playerName': 'Alice'})

        assert exc_info.value.code == ErrorCode.MISSING_ROOM_CODE

    def test_departure_from_closed_room_is_silent(self):
        departure = Departure(room_code='OLD001', player=Player('sid-a', 'Alice', True), room_closed=True)

        self.handler.announce_departure(departure)

        self.mock_leave_room.assert_called_once_with('OLD001')
        self.mock_broadcast_service.broadcast_player_left.assert_not_called()
        self.mock_broadcast_service.broadcast_new_host.assert_not_called()

    def test_no_departure_is_noop(self):
        self.handler.announce_departure(None)

        self.mock_leave_room.assert_not_called()
