"""
Game tunables read from the loaded AppConfig.

When no configuration has been loaded (unit tests, scripts) every property
falls back to the built-in default listed in ``DEFAULTS``.
"""

import logging

logger = logging.getLogger(__name__)

DEFAULTS = {
    'max_players_per_room': 8,
    'min_players_required': 2,
    'room_code_length': 6,
    'room_code_max_attempts': 10,
    'start_countdown_seconds': 3,
    'countdown_tick_seconds': 1.0,
    'drawing_phase_duration': 90,
    'max_player_name_length': 24,
    'max_chat_message_length': 280,
}


class GameSettings:
    """Read-only view over the game section of AppConfig."""

    def __init__(self, app_config=None):
        self._config = app_config
        if app_config is None:
            import config_factory
            try:
                self._config = config_factory.get_config()
            except config_factory.ConfigError as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")

    def _get(self, name: str):
        if self._config is None:
            return DEFAULTS[name]
        return getattr(self._config, name)

    @property
    def max_players_per_room(self) -> int:
        return self._get('max_players_per_room')

    @property
    def min_players_required(self) -> int:
        """Minimum roster size for startGame."""
        return self._get('min_players_required')

    @property
    def room_code_length(self) -> int:
        return self._get('room_code_length')

    @property
    def room_code_max_attempts(self) -> int:
        return self._get('room_code_max_attempts')

    @property
    def start_countdown_seconds(self) -> int:
        """Number of countdown ticks before the drawing phase opens."""
        return self._get('start_countdown_seconds')

    @property
    def countdown_tick_seconds(self) -> float:
        return self._get('countdown_tick_seconds')

    @property
    def drawing_phase_duration(self) -> int:
        """Seconds announced with the drawing phaseUpdate."""
        return self._get('drawing_phase_duration')

    @property
    def max_player_name_length(self) -> int:
        return self._get('max_player_name_length')

    @property
    def max_chat_message_length(self) -> int:
        return self._get('max_chat_message_length')


_game_settings_instance = None


def get_game_settings(app_config=None) -> GameSettings:
    """Return the shared GameSettings, rebuilding it when a config is passed."""
    global _game_settings_instance
    if _game_settings_instance is None or app_config is not None:
        _game_settings_instance = GameSettings(app_config)
    return _game_settings_instance


def reset_game_settings():
    global _game_settings_instance
    _game_settings_instance = None
