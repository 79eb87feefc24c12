"""
Services package for T-Shirt Showdown

Contains the service classes wired together by the service container.
"""

from .room_code_generator import RoomCodeGenerator
from .player_directory import PlayerDirectory
from .validation_service import ValidationService
from .error_response_factory import ErrorResponseFactory
from .room_state_presenter import RoomStatePresenter
from .broadcast_service import BroadcastService
from .phase_scheduler import PhaseScheduler
from .rate_limit_service import EventQueueManager

__all__ = [
    'RoomCodeGenerator',
    'PlayerDirectory',
    'ValidationService',
    'ErrorResponseFactory',
    'RoomStatePresenter',
    'BroadcastService',
    'PhaseScheduler',
    'EventQueueManager'
]
