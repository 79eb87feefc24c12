"""
Configuration Factory - Centralized configuration management for T-Shirt Showdown
Provides type-safe configuration with validation and environment-specific settings.
"""

import os
import logging
from typing import Any, Dict, Optional
from enum import Enum
from dataclasses import dataclass, field, fields

DEV_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


def setting(default: Any, env: str, minimum: Any = None, maximum: Any = None):
    """Dataclass field read from the ``env`` variable, optionally range-checked."""
    return field(default=default, metadata={'env': env, 'min': minimum, 'max': maximum})


@dataclass
class AppConfig:
    """Application configuration with type safety and validation"""

    secret_key: str = setting(DEV_SECRET_KEY, 'SECRET_KEY')
    debug: bool = setting(False, 'DEBUG')
    flask_env: str = 'development'

    host: str = setting('0.0.0.0', 'HOST')
    port: int = setting(3000, 'PORT', 1, 65535)
    cors_allowed_origins: str = setting('', 'SOCKETIO_CORS_ALLOWED_ORIGINS')  # enforced in production only

    max_players_per_room: int = setting(8, 'MAX_PLAYERS_PER_ROOM', 1, 50)
    min_players_required: int = setting(2, 'MIN_PLAYERS_REQUIRED', 1)
    room_code_length: int = setting(6, 'ROOM_CODE_LENGTH', 4, 12)
    room_code_max_attempts: int = setting(10, 'ROOM_CODE_MAX_ATTEMPTS', 1, 100)

    start_countdown_seconds: int = setting(3, 'START_COUNTDOWN_SECONDS', 1, 30)
    countdown_tick_seconds: float = setting(1.0, 'COUNTDOWN_TICK_SECONDS', 0, 10)
    drawing_phase_duration: int = setting(90, 'DRAWING_PHASE_DURATION', 10, 1800)

    max_player_name_length: int = setting(24, 'MAX_PLAYER_NAME_LENGTH', 1, 100)
    max_chat_message_length: int = setting(280, 'MAX_CHAT_MESSAGE_LENGTH', 1, 5000)

    rate_limit_enabled: bool = setting(True, 'RATE_LIMIT_ENABLED')
    max_events_per_second: int = setting(10, 'MAX_EVENTS_PER_SECOND', 1, 1000)
    max_events_per_minute: int = setting(120, 'MAX_EVENTS_PER_MINUTE', maximum=10000)
    rate_limit_block_seconds: int = setting(60, 'RATE_LIMIT_BLOCK_SECONDS', 1)

    # Gunicorn
    worker_connections: int = setting(1000, 'WORKER_CONNECTIONS', 1)
    timeout: int = setting(30, 'TIMEOUT', 1)
    keepalive: int = setting(2, 'KEEPALIVE', 0)
    log_level: str = setting('info', 'LOG_LEVEL')

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        for f in fields(self):
            low, high = f.metadata.get('min'), f.metadata.get('max')
            value = getattr(self, f.name)
            if (low is not None and value < low) or (high is not None and value > high):
                raise ConfigError(f"Invalid {f.name}: {value}")

        if self.min_players_required > self.max_players_per_room:
            raise ConfigError(f"Invalid min_players_required: {self.min_players_required}")

        if self.max_events_per_minute < self.max_events_per_second:
            raise ConfigError(f"Invalid max_events_per_minute: {self.max_events_per_minute}")

        if self.is_production and self.secret_key == DEV_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def allowed_origins(self) -> list:
        """Parsed CORS allow-list."""
        return [o.strip() for o in self.cors_allowed_origins.split(',') if o.strip()]


class ConfigurationFactory:
    """Process-wide holder of the loaded AppConfig."""

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._logger = logging.getLogger(__name__)
        return cls._instance

    def _convert(self, env_key: str, raw: str, var_type: type, default: Any) -> Any:
        if var_type is bool:
            return raw.lower() in ('true', '1', 'yes', 'on')
        if var_type in (int, float):
            try:
                return var_type(raw)
            except ValueError:
                self._logger.warning(f"Invalid {var_type.__name__} value for {env_key}: {raw}, using default: {default}")
                return default
        return raw

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        ``TESTING=1`` selects the testing environment regardless of
        ``FLASK_ENV``; testing and development default to debug mode, and
        rate limiting is off under test unless ``RATE_LIMIT_ENABLED`` is set.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'SHOWDOWN_')
        """
        def raw(key: str) -> Optional[str]:
            return os.environ.get(f"{env_prefix}{key}")

        flask_env = raw('FLASK_ENV') or 'development'
        if (raw('TESTING') or '').lower() in ('true', '1', 'yes', 'on'):
            flask_env = 'testing'
        environment = {
            'development': Environment.DEVELOPMENT,
            'testing': Environment.TESTING,
        }.get(flask_env, Environment.PRODUCTION)

        values: Dict[str, Any] = {
            'flask_env': flask_env,
            'environment': environment,
            'debug': environment != Environment.PRODUCTION,
            'rate_limit_enabled': environment != Environment.TESTING,
        }
        for f in fields(AppConfig):
            env_key = f.metadata.get('env')
            if env_key is None or raw(env_key) is None:
                continue
            default = values.get(f.name, f.default)
            values[f.name] = self._convert(f"{env_prefix}{env_key}", raw(env_key), f.type, default)

        self._config = AppConfig(**values)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        self._config = None
        return self

    def get_flask_config(self) -> Dict[str, Any]:
        """Settings for Flask's app.config.update()."""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'TESTING': config.is_testing,
        }


_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)


def reset_config() -> ConfigurationFactory:
    return _config_factory.reset()
