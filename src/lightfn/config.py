"""Configuration loader with multi-source support."""

import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, Type, TypeVar

import platformdirs
import toml
from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)

# Separates nesting levels in env var names: LIGHTFN_CLONE__ON_UNKNOWN
ENV_NESTING_DELIMITER = "__"


class ConfigLoader:
    """Loads configuration from multiple sources with priority.

    Later sources win: shipped defaults, then system config, then user
    config, then environment variables.
    """

    def __init__(self, app_name: str = "lightfn", config_class: Optional[Type[T]] = None) -> None:
        self.app_name = app_name
        self.config_class = config_class
        self._config: Optional[T] = None

    def load(self, defaults_path: Optional[Path] = None) -> T:
        """Load configuration from all sources.

        Args:
            defaults_path: Optional path to defaults.toml file

        Returns:
            Validated configuration object (or the merged dict when no
            config class was given)

        Raises:
            ConfigurationError: If a config file cannot be parsed or the
                merged configuration fails validation
        """
        config_dict = self._load_defaults(defaults_path)

        system_config = self._load_system_config()
        if system_config:
            config_dict = self._deep_merge(config_dict, system_config)

        user_config = self._load_user_config()
        if user_config:
            config_dict = self._deep_merge(config_dict, user_config)

        config_dict = self._apply_env_overrides(config_dict)

        if self.config_class:
            try:
                self._config = self.config_class(**config_dict)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid {self.app_name} configuration: {e}", errors=e.errors()
                ) from e
        else:
            self._config = config_dict

        return self._config

    def _read_toml(self, path: Path) -> Dict[str, Any]:
        try:
            return toml.load(path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigurationError(
                f"Cannot read config file: {path}", path=str(path), reason=str(e)
            ) from e

    def _load_defaults(self, defaults_path: Optional[Path] = None) -> Dict[str, Any]:
        """Load default configuration shipped with the application."""
        if defaults_path and defaults_path.exists():
            return self._read_toml(defaults_path)

        possible_paths = [
            Path.cwd() / "config" / "defaults.toml",
            Path.home() / ".config" / self.app_name / "defaults.toml",
        ]

        for path in possible_paths:
            if path.exists():
                return self._read_toml(path)

        return {}

    def _load_system_config(self) -> Optional[Dict[str, Any]]:
        """Load system-wide configuration."""
        if os.name == "nt":
            system_path = (
                Path(os.environ.get("PROGRAMDATA", "C:\\ProgramData"))
                / self.app_name
                / "config.toml"
            )
        else:
            system_path = Path(f"/etc/{self.app_name}/config.toml")

        if system_path.exists():
            return self._read_toml(system_path)

        return None

    def _load_user_config(self) -> Optional[Dict[str, Any]]:
        """Load user-specific configuration."""
        user_config_path = self.user_config_path()

        if user_config_path.exists():
            logger.debug(f"Loading user config from {user_config_path}")
            return self._read_toml(user_config_path)

        logger.debug(f"User config not found at {user_config_path}")
        return None

    def user_config_path(self) -> Path:
        """Path of the per-user config.toml."""
        user_config_dir = platformdirs.user_config_dir(appname=self.app_name, appauthor=False)
        return Path(user_config_dir) / "config.toml"

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Override config with environment variables.

        Variables whose top-level section is not a field of the config class
        are skipped with a warning, so an unrelated variable sharing the prefix
        cannot break loading. Unknown keys inside a known section are kept and
        rejected by validation.
        """
        known_sections = set(self.config_class.model_fields) if self.config_class else None
        prefix = f"{self.app_name.upper().replace('-', '_')}_"

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            # LIGHTFN_DEBOUNCE__DEFAULT_DELAY_SECONDS -> debounce.default_delay_seconds
            key_path = env_key[len(prefix):].lower().split(ENV_NESTING_DELIMITER)

            if known_sections is not None and key_path[0] not in known_sections:
                logger.warning(
                    f"Ignoring environment variable {env_key}: no such config section",
                    extra={"extra_fields": {"env_key": env_key}},
                )
                continue

            current = config
            for part in key_path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            final_key = key_path[-1]
            current[final_key] = self._convert_env_value(env_value)
            logger.debug(f"Config override from environment: {env_key}")

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert string environment variable to appropriate type.

        Booleans and numbers are recognized; everything else stays a string,
        commas included, so paths such as log file names pass through intact.
        """
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def save_user_config(self, config: BaseModel) -> Path:
        """Save configuration as the user's config.toml.

        Returns:
            Path the config was written to
        """
        user_config_path = self.user_config_path()
        user_config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(exclude_none=True)
        with open(user_config_path, "w") as f:
            toml.dump(config_dict, f)

        logger.info(f"Saved user config to {user_config_path}")
        return user_config_path

    @property
    def config(self) -> T:
        """Get loaded configuration."""
        if self._config is None:
            self._config = self.load()
        return self._config
