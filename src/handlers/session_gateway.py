"""
Session Gateway for T-Shirt Showdown.

Registers the Socket.IO event surface: connection handling directly on the
SocketIO instance, every game event through the SocketEventRouter.
"""

import logging
from typing import Optional
from flask import request

from config_factory import get_config
from container import get_container
from src.services.rate_limit_service import get_event_queue_manager
from .base_handler import RoomHandlerMixin
from .socket_event_router import SocketEventRouter
from .room_connection_handler import RoomConnectionHandler
from .game_action_handler import GameActionHandler

logger = logging.getLogger(__name__)


class SessionGateway(RoomHandlerMixin):
    """Boundary between Socket.IO sessions and the room services."""

    def __init__(self, socketio_instance, app_config=None):
        self.socketio = socketio_instance
        self.app_config = app_config or get_config()
        self._container = get_container()
        self.room_handler = RoomConnectionHandler()
        self.game_handler = GameActionHandler()
        self.router: Optional[SocketEventRouter] = None

    @property
    def room_registry(self):
        return self._container.get('RoomRegistry')

    @property
    def broadcast_service(self):
        return self._container.get('BroadcastService')

    def register(self) -> SocketEventRouter:
        """Register connection handlers and route every game event."""
        router = SocketEventRouter(self.socketio)

        # Connection events bypass the router; connect may reject the session
        self.socketio.on_event('connect', self.handle_connect)
        self.socketio.on_event('disconnect', self.handle_disconnect)

        router.register_route('createRoom', self.room_handler.handle_create_room)
        router.register_route('joinRoom', self.room_handler.handle_join_room)
        router.register_route('startGame', self.game_handler.handle_start_game)
        router.register_route('submitDrawing', self.game_handler.handle_submit_drawing)
        router.register_route('submitSlogan', self.game_handler.handle_submit_slogan)
        router.register_route('chatMessage', self.game_handler.handle_chat_message)

        router.bind()
        self.router = router

        logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
        return router

    def handle_connect(self, auth=None):
        """Accept a session, enforcing the Origin allow-list in production."""
        origin = request.headers.get('Origin')
        allowed = self.app_config.allowed_origins
        if self.app_config.is_production and allowed and origin and origin not in allowed:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False
        logger.info(f'Client connected: {request.sid} from Origin: {origin}')

    def handle_disconnect(self, reason=None):
        """Remove the session's player, migrating host or closing the room."""
        sid = request.sid
        logger.info(f'Client disconnected: {sid}')

        departure = self.room_registry.remove_player(sid)
        # Socket.IO drops the session from its rooms on its own
        self.announce_departure(departure, leave_socketio_room=False)

        event_queue_manager = get_event_queue_manager()
        if event_queue_manager is not None:
            event_queue_manager.forget_client(sid)


def register_socket_handlers(socketio_instance, app_config=None) -> SessionGateway:
    """Create the session gateway and register it with the SocketIO instance."""
    gateway = SessionGateway(socketio_instance, app_config)
    gateway.register()
    return gateway
