"""Configuration and preference services for Study Timer.

``ConfigService`` owns ``config.json`` (timer durations, history paging,
storage location) in the platform config directory. ``PreferencesService``
owns the user-facing preferences (daily goal, theme), which are persisted as
independent key-value records next to the session history.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError

from studytimer_cli.exceptions import PersistenceReadError, PersistenceWriteError
from studytimer_cli.models.config_models import (
    DEFAULT_DAILY_GOAL_MINUTES,
    AppConfig,
    Preferences,
)
from studytimer_cli.models.focus.goals import leading_int

from .storage import FileKeyValueStorage

logger = logging.getLogger(__name__)

_APP_NAME = "studytimer_cli"

GOAL_KEY = "dailyGoal"
THEME_KEY = "darkMode"


class ConfigService:
    """Service for loading and saving the application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def data_dir(self) -> Path:
        """Directory holding the persisted records."""
        override = self.config.storage.data_dir
        if override:
            return Path(override).expanduser()
        return Path(user_data_dir(_APP_NAME))

    def load_config(self) -> AppConfig:
        """Load configuration, falling back to defaults if it is unusable."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            try:
                self.save_config()
            except PersistenceWriteError as e:
                logger.warning("Could not write default config: %s", e)
        except (OSError, ValidationError) as e:
            # Keep the broken file for the user to fix; run on defaults.
            logger.warning("Config at %s is unusable, using defaults: %s", self.config_path, e)
            self._config = AppConfig()

        return self._config

    def save_config(self) -> None:
        """Save the current configuration.

        Raises:
            PersistenceWriteError: If the file cannot be written
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise PersistenceWriteError("config", str(e)) from e

    def reset_config(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def get_storage(self) -> FileKeyValueStorage:
        """Key-value storage rooted at the configured data directory."""
        return FileKeyValueStorage(self.data_dir)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


class PreferencesService:
    """Daily goal and theme preferences.

    Absent or malformed records fall back to the defaults (120 minutes,
    light theme) without raising. Writes that fail are logged and returned
    to the caller; the in-memory value is kept either way.
    """

    def __init__(self, storage: FileKeyValueStorage):
        self.storage = storage
        self._preferences = Preferences()

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def load(self) -> Preferences:
        """Read both preference records."""
        self._preferences = Preferences(
            daily_goal_minutes=self._read_goal(),
            dark_mode=self._read_dark_mode(),
        )
        return self._preferences

    def _read_raw(self, key: str) -> str | None:
        try:
            return self.storage.get(key)
        except PersistenceReadError as e:
            logger.warning("Preference '%s' unreadable, using default: %s", key, e)
            return None

    def _read_goal(self) -> int:
        raw = self._read_raw(GOAL_KEY)
        if raw is None:
            return DEFAULT_DAILY_GOAL_MINUTES
        value = leading_int(raw)
        if value is None:
            logger.warning("Stored daily goal %r is malformed, using default", raw)
            return DEFAULT_DAILY_GOAL_MINUTES
        if value < 0:
            logger.warning("Stored daily goal %r is negative, using default", raw)
            return DEFAULT_DAILY_GOAL_MINUTES
        return value

    def _read_dark_mode(self) -> bool:
        raw = self._read_raw(THEME_KEY)
        if raw is None:
            return False
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored theme flag %r is malformed, using light", raw)
            return False
        if not isinstance(value, bool):
            logger.warning("Stored theme flag %r is not a boolean, using light", raw)
            return False
        return value

    def _write(self, key: str, value: str) -> PersistenceWriteError | None:
        try:
            self.storage.set(key, value)
        except PersistenceWriteError as e:
            logger.warning("Could not save preference '%s': %s", key, e)
            return e
        return None

    def set_daily_goal(self, minutes: int) -> PersistenceWriteError | None:
        """Store an already-validated goal (minutes >= 0)."""
        if minutes < 0:
            raise ValueError("daily goal must be >= 0")
        self._preferences = self._preferences.model_copy(
            update={"daily_goal_minutes": minutes}
        )
        return self._write(GOAL_KEY, str(minutes))

    def set_dark_mode(self, enabled: bool) -> PersistenceWriteError | None:
        self._preferences = self._preferences.model_copy(update={"dark_mode": enabled})
        return self._write(THEME_KEY, json.dumps(enabled))

    def toggle_dark_mode(self) -> PersistenceWriteError | None:
        return self.set_dark_mode(not self._preferences.dark_mode)
