"""
REST API endpoints for T-Shirt Showdown.
"""

import logging
import time
from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)


def create_api_blueprint(services, started_at=None):
    """Create and configure the API Blueprint with service dependencies.

    Args:
        services: Mapping holding 'room_registry' and 'room_state_presenter'
        started_at: Process start time used for uptime (defaults to now)
    """
    room_registry = services['room_registry']
    presenter = services['room_state_presenter']
    started_at = started_at if started_at is not None else time.time()

    api = Blueprint('api', __name__)

    @api.route('/health')
    def health():
        """Liveness check with room and player counts."""
        uptime = round(time.time() - started_at, 3)
        return jsonify(presenter.create_health(
            room_registry.room_count(), room_registry.player_count(), uptime
        ))

    @api.route('/stats')
    def stats():
        """Per-room summary of every live room."""
        rooms = room_registry.summarize_rooms()
        logger.debug(f'Stats requested: {len(rooms)} rooms')
        return jsonify(presenter.create_stats(rooms, room_registry.player_count()))

    return api
