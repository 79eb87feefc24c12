"""
Socket Event Router

Maps inbound Socket.IO event names to game handlers and binds them to the
SocketIO instance, logging every dispatch with the originating session.
"""

import logging
import time
from typing import Dict, List, Callable, Any
from flask import request

logger = logging.getLogger(__name__)


class EventRouteNotFoundError(Exception):
    """Raised when an event has no registered handler."""
    pass


class SocketEventRouter:
    """Event name -> handler table for the game's Socket.IO surface."""

    def __init__(self, socketio_instance):
        self.socketio = socketio_instance
        self._routes: Dict[str, Callable] = {}

    def register_route(self, event_name: str, handler: Callable) -> None:
        if event_name in self._routes:
            raise ValueError(f"Route '{event_name}' is already registered")
        self._routes[event_name] = handler
        logger.debug(f"Registered route: {event_name} -> {getattr(handler, '__name__', handler)}")

    def handle_event(self, event_name: str, data: Any = None) -> Any:
        """
        Dispatch an event to its handler.

        Raises:
            EventRouteNotFoundError: If no handler is registered for the event
        """
        handler = self._routes.get(event_name)
        if handler is None:
            raise EventRouteNotFoundError(f"No handler registered for event: {event_name}")

        sid = request.sid
        started = time.monotonic()
        try:
            return handler(data)
        except Exception as e:
            logger.error(f"Error handling event {event_name} from {sid}: {e}")
            raise
        finally:
            logger.debug(f"Handled {event_name} from {sid} in {(time.monotonic() - started) * 1000:.1f}ms")

    def bind(self) -> None:
        """Bind every registered route to the SocketIO instance."""
        for event_name in self._routes:
            self.socketio.on_event(event_name, self._dispatcher(event_name))

    def _dispatcher(self, event_name: str) -> Callable:
        def socketio_handler(data=None):
            return self.handle_event(event_name, data)
        socketio_handler.__name__ = f'on_{event_name}'
        return socketio_handler

    def get_registered_events(self) -> List[str]:
        return list(self._routes)
