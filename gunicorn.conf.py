"""
Gunicorn settings for T-Shirt Showdown.

Rooms, sessions and timers live in process memory, so the deployment is a
single eventlet worker that is never recycled.
"""

import sys
import logging

from config_factory import load_config, ConfigError


def on_starting(server):
    """Abort in the master before any worker forks if the environment is invalid."""
    logger = logging.getLogger(__name__)
    try:
        config = load_config()
    except ConfigError as e:
        logger.critical(f"FATAL: Invalid configuration. Server shutting down. Error: {e}")
        sys.exit(1)
    logger.info(f"Configuration valid ({config.environment.value}), "
                f"rooms hold up to {config.max_players_per_room} players")


# Named app_config so it does not shadow gunicorn's own 'config'
app_config = load_config()

bind = f"{app_config.host}:{app_config.port}"

workers = 1
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive
max_requests = 0
preload_app = False

accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level

proc_name = "tshirt-showdown"
