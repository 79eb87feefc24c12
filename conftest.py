"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os
from unittest.mock import patch

# Ensure testing environment
os.environ['TESTING'] = '1'

from tests.helpers.socket_mocks import create_mock_socketio, ImmediateTaskRunner


@pytest.fixture(scope="session")
def app():
    """Flask app for testing."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """SocketIO instance for testing."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture(scope="function")
def app_services(app):
    """Services wired into the application, with room state cleared around each test.

    Countdowns run inline so a startGame emits the whole countdown before returning.
    """
    from app import services

    services['room_registry'].clear()
    with patch.object(services['phase_scheduler'], 'task_runner', ImmediateTaskRunner()):
        yield services
    services['phase_scheduler'].stop()
    services['room_registry'].clear()


@pytest.fixture(scope="function")
def game_settings():
    """Game settings built from default configuration values."""
    from config_factory import AppConfig, Environment
    from src.config.game_settings import GameSettings
    return GameSettings(AppConfig(environment=Environment.TESTING))


@pytest.fixture(scope="function")
def mock_socketio():
    return create_mock_socketio()


@pytest.fixture(scope="function")
def container(mock_socketio):
    """Isolated service container backed by a mock SocketIO."""
    from container import ServiceContainer

    service_container = ServiceContainer()
    service_container.set_external_dependency('socketio', mock_socketio)
    service_container.configure_services()
    return service_container

