"""
Error Response Factory Unit Tests
Tests for error payload creation and the with_error_handling decorator.
"""

from unittest.mock import patch

from src.core.errors import ErrorCode, GameError, RoomFullError, RoomNotFoundError, ValidationError
from src.services.error_response_factory import ErrorResponseFactory, with_error_handling


class TestErrorResponseFactory:

    def setup_method(self):
        self.factory = ErrorResponseFactory()

    def test_create_error_response(self):
        response = self.factory.create_error_response(ErrorCode.ROOM_NOT_FOUND, 'Room not found!')

        assert response == {'message': 'Room not found!', 'code': 'ROOM_NOT_FOUND'}

    def test_create_error_response_with_details(self):
        response = self.factory.create_error_response(ErrorCode.ROOM_FULL, 'Full', {'maxPlayers': 8})

        assert response['details'] == {'maxPlayers': 8}

    def test_response_for_game_error(self):
        response = self.factory.response_for(RoomFullError('ABCDEF', 8))

        assert response['code'] == 'ROOM_FULL'
        assert response['message'] == 'Room is full! Maximum 8 players.'
        assert response['details'] == {'roomCode': 'ABCDEF', 'maxPlayers': 8}

    @patch('src.services.error_response_factory.emit')
    def test_emit_error(self, mock_emit):
        self.factory.emit_error(ErrorCode.INVALID_DATA, 'Bad data')

        mock_emit.assert_called_once_with('error', {'message': 'Bad data', 'code': 'INVALID_DATA'})

    def test_response_for_validation_error(self):
        error = ValidationError(ErrorCode.MISSING_PLAYER_NAME, 'Player name is required')

        assert self.factory.response_for(error) == {
            'message': 'Player name is required', 'code': 'MISSING_PLAYER_NAME'
        }

    def test_response_for_unexpected_error_hides_details(self):
        response = self.factory.response_for(KeyError('secret'), 'handler')

        assert response == {'message': 'An internal error occurred', 'code': 'INTERNAL_ERROR'}


class TestWithErrorHandling:

    @patch('src.services.error_response_factory.emit')
    def test_success_passes_through(self, mock_emit):
        @with_error_handling
        def handler(data):
            return data['value']

        assert handler({'value': 5}) == 5
        mock_emit.assert_not_called()

    @patch('src.services.error_response_factory.emit')
    def test_game_error_emitted_to_requester(self, mock_emit):
        @with_error_handling
        def handler():
            raise RoomNotFoundError('ZZZZZZ')

        assert handler() is None
        mock_emit.assert_called_once_with('error', {
            'message': 'Room not found!',
            'code': 'ROOM_NOT_FOUND',
            'details': {'roomCode': 'ZZZZZZ'}
        })

    @patch('src.services.error_response_factory.emit')
    def test_unexpected_error_becomes_internal_error(self, mock_emit):
        @with_error_handling
        def handler():
            raise RuntimeError('boom')

        handler()

        mock_emit.assert_called_once_with('error', {
            'message': 'An internal error occurred',
            'code': 'INTERNAL_ERROR'
        })

    def test_base_game_error_defaults_to_internal(self):
        assert GameError('x').code == ErrorCode.INTERNAL_ERROR

    def test_preserves_function_metadata(self):
        @with_error_handling
        def handle_thing():
            """Doc."""

        assert handle_thing.__name__ == 'handle_thing'
