"""
T-Shirt Showdown server.

Builds the Flask app and its Socket.IO server, wires the service container and
registers the REST blueprint and socket handlers. ``wsgi.py`` and the tests
import the module-level objects defined here.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging
import atexit
import time

from container import configure_container
from config_factory import load_config, ConfigurationFactory
from src.services.rate_limit_service import EventQueueManager, set_event_queue_manager
from src.routes.api import create_api_blueprint
from src.handlers.session_gateway import register_socket_handlers

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

started_at = time.time()

app = Flask(__name__)
app_config = load_config()
app.config.update(ConfigurationFactory().get_flask_config())

# Outside production any origin may connect; in production only the allow-list (empty means same-origin)
cors_origins = (app_config.allowed_origins or []) if app_config.is_production else "*"
socketio = SocketIO(app, cors_allowed_origins=cors_origins, async_mode='eventlet')

container = configure_container(socketio)
services = {
    'room_registry': container.get('RoomRegistry'),
    'phase_scheduler': container.get('PhaseScheduler'),
    'broadcast_service': container.get('BroadcastService'),
    'validation_service': container.get('ValidationService'),
    'room_state_presenter': container.get('RoomStatePresenter')
}

set_event_queue_manager(EventQueueManager.from_config(app_config))

app.register_blueprint(create_api_blueprint(services, started_at=started_at))
session_gateway = register_socket_handlers(socketio, app_config)


def cleanup_on_exit():
    logger.info("Shutting down T-Shirt Showdown server...")
    services['phase_scheduler'].stop()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    logger.info(f"Starting T-Shirt Showdown server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    finally:
        cleanup_on_exit()
