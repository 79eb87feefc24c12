"""
Phase Scheduler - Drives the timed part of the game timeline for each room.

This service handles:
- The pre-game countdown (gameStarting, countdownUpdate ticks)
- Opening the drawing phase once the countdown finishes (phaseUpdate)
- Tracking one countdown handle per room and cancelling it when the room closes

Countdowns run as Flask-SocketIO background tasks so they cooperate with the
eventlet hub. Every emission is preceded by a liveness check, so a cancelled
countdown or one whose room has closed stops without emitting.
"""

import logging
import threading
from typing import Dict

from src.config.game_settings import get_game_settings
from src.core.game_phases import GamePhase

logger = logging.getLogger(__name__)


class CountdownHandle:
    """Cancellation token for one room's countdown task."""

    def __init__(self, room_code: str):
        self.room_code = room_code
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class PhaseScheduler:
    """Runs per-room countdowns and phase transitions."""

    def __init__(self, broadcast_service, room_registry, task_runner, game_settings=None):
        """Initialize the phase scheduler.

        Args:
            broadcast_service: Service for broadcasting messages to rooms
            room_registry: Registry owning room state
            task_runner: Object providing ``start_background_task`` and ``sleep``
                (the Flask-SocketIO instance in production)
            game_settings: Optional GameSettings override
        """
        self.broadcast_service = broadcast_service
        self.room_registry = room_registry
        self.task_runner = task_runner
        self.game_settings = game_settings or get_game_settings()

        self._countdowns: Dict[str, CountdownHandle] = {}
        self._lock = threading.Lock()

        # Room destruction cancels timers synchronously, inside the registry lock
        room_registry.add_room_closed_listener(self.cancel)

        logger.info("PhaseScheduler initialized")

    def start_countdown(self, room_code: str) -> bool:
        """
        Arm the pre-game countdown for a room.

        Broadcasts ``gameStarting`` and spawns the countdown task.

        Args:
            room_code: Room that just entered the starting phase

        Returns:
            True if armed, False if a countdown is already running for the room
        """
        with self._lock:
            if room_code in self._countdowns:
                logger.warning(f"Countdown already running for room {room_code}, not arming another")
                return False
            handle = CountdownHandle(room_code)
            self._countdowns[room_code] = handle

        countdown = self.game_settings.start_countdown_seconds
        logger.info(f"Countdown armed for room {room_code} ({countdown}s)")
        self.broadcast_service.broadcast_game_starting(room_code, countdown)
        self.task_runner.start_background_task(self._run_countdown, handle, countdown)
        return True

    def cancel(self, room_code: str) -> bool:
        """
        Cancel a room's countdown.

        Returns:
            True if a countdown was pending
        """
        with self._lock:
            handle = self._countdowns.pop(room_code, None)
            if handle is not None:
                handle.cancel()

        if handle is None:
            return False

        logger.info(f"Cancelled countdown for room {room_code}")
        return True

    def stop(self):
        """Cancel every pending countdown (application shutdown)."""
        with self._lock:
            room_codes = list(self._countdowns.keys())
        for room_code in room_codes:
            self.cancel(room_code)
        logger.info("PhaseScheduler stopped")

    def has_active_countdown(self, room_code: str) -> bool:
        return room_code in self._countdowns

    def _is_live(self, handle: CountdownHandle) -> bool:
        return not handle.cancelled and self.room_registry.room_exists(handle.room_code)

    def _run_countdown(self, handle: CountdownHandle, countdown: int):
        """Background task: tick the countdown, then open the drawing phase."""
        room_code = handle.room_code
        tick = self.game_settings.countdown_tick_seconds
        try:
            for remaining in range(countdown, 0, -1):
                if not self._is_live(handle):
                    logger.debug(f"Countdown for room {room_code} stopped at {remaining}")
                    return
                self.broadcast_service.broadcast_countdown_update(room_code, remaining)
                self.task_runner.sleep(tick)

            if not self._is_live(handle):
                return
            self._open_drawing(handle)
        except Exception as e:
            logger.error(f"Error running countdown for room {room_code}: {e}")
            # A room whose countdown died goes back to the lobby
            if self.room_registry.abort_start(room_code):
                logger.warning(f"Room {room_code} returned to waiting after a failed countdown")
        finally:
            with self._lock:
                if self._countdowns.get(room_code) is handle:
                    del self._countdowns[room_code]

    def _open_drawing(self, handle: CountdownHandle):
        room_code = handle.room_code
        duration = self.game_settings.drawing_phase_duration
        if not self.room_registry.set_phase(room_code, GamePhase.DRAWING) or handle.cancelled:
            return
        self.broadcast_service.broadcast_phase_update(room_code, GamePhase.DRAWING.value, duration)
