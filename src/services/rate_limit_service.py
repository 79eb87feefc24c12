"""
Per-session flood protection for inbound Socket.IO events.

Each session keeps a sliding one-minute window of event timestamps. A session
that exceeds either the per-second or the per-minute allowance is blocked for
``block_duration`` seconds, during which all of its events are dropped with a
RATE_LIMITED error.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from functools import wraps
from typing import Callable, Deque, Dict, Optional

from flask import request

from src.core.errors import ErrorCode
from src.services.error_response_factory import ErrorResponseFactory

logger = logging.getLogger(__name__)


@dataclass
class SessionWindow:
    events: Deque[float] = field(default_factory=deque)
    blocked_until: float = 0.0


class EventQueueManager:
    """Tracks per-session event rates and temporarily blocks flooding sessions."""

    def __init__(self, enabled: bool = True, max_events_per_second: int = 10,
                 max_events_per_minute: int = 120, block_duration: int = 60,
                 clock: Callable[[], float] = time.monotonic):
        self.enabled = enabled
        self.max_events_per_second = max_events_per_second
        self.max_events_per_minute = max_events_per_minute
        self.block_duration = block_duration
        self._clock = clock
        self._sessions: Dict[str, SessionWindow] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, app_config) -> 'EventQueueManager':
        return cls(
            enabled=app_config.rate_limit_enabled,
            max_events_per_second=app_config.max_events_per_second,
            max_events_per_minute=app_config.max_events_per_minute,
            block_duration=app_config.rate_limit_block_seconds
        )

    def is_blocked(self, session_id: str) -> bool:
        with self._lock:
            window = self._sessions.get(session_id)
            return window is not None and window.blocked_until > self._clock()

    def can_process_event(self, session_id: str, event_type: str) -> bool:
        """Record an event and report whether the session is within its limits."""
        if not self.enabled:
            return True

        with self._lock:
            now = self._clock()
            window = self._sessions.setdefault(session_id, SessionWindow())
            if window.blocked_until > now:
                return False

            events = window.events
            while events and now - events[0] > 60:
                events.popleft()
            events.append(now)

            last_second = sum(1 for t in events if now - t <= 1)
            if last_second > self.max_events_per_second:
                self._block(session_id, window, now, f"{last_second} {event_type} events in one second")
                return False
            if len(events) > self.max_events_per_minute:
                self._block(session_id, window, now, f"{len(events)} events in one minute")
                return False
            return True

    def _block(self, session_id: str, window: SessionWindow, now: float, reason: str):
        window.blocked_until = now + self.block_duration
        window.events.clear()
        logger.warning(f"Blocked client {session_id} for {self.block_duration}s: {reason}")

    def forget_client(self, session_id: str):
        """Drop rate history for a disconnected session."""
        with self._lock:
            self._sessions.pop(session_id, None)


# Installed by app.py
_event_queue_manager: Optional[EventQueueManager] = None


def set_event_queue_manager(manager):
    global _event_queue_manager
    _event_queue_manager = manager


def get_event_queue_manager() -> Optional[EventQueueManager]:
    return _event_queue_manager


def prevent_event_overflow(event_type: str = "generic"):
    """Decorator that drops events from sessions exceeding their rate limit."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if _event_queue_manager is None:
                raise RuntimeError("Event queue manager not initialized. Call set_event_queue_manager() first.")

            if not _event_queue_manager.can_process_event(request.sid, event_type):
                logger.debug(f"Dropped {event_type} from rate limited client {request.sid}")
                ErrorResponseFactory().emit_error(
                    ErrorCode.RATE_LIMITED,
                    'Too many requests. Please slow down.',
                    {'retry_after': _event_queue_manager.block_duration}
                )
                return None

            return func(*args, **kwargs)

        return wrapper
    return decorator
