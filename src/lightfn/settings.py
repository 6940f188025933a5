"""Settings models and the lazily loaded process-wide settings."""

import logging
import threading
from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict

from .config import ConfigLoader
from .logging_config import LoggingConfig

logger = logging.getLogger(__name__)


class CloneConfig(BaseModel):
    """Deep clone behaviour."""

    model_config = ConfigDict(extra='forbid')

    on_unknown: Literal["warn", "error"] = Field(
        default="warn",
        description="What to do with a value kind that has no cloning strategy: "
                    "'warn' copies it by reference, 'error' raises UncloneableError"
    )


class DebounceSettings(BaseModel):
    """Defaults applied when building debounced functions."""

    model_config = ConfigDict(extra='forbid')

    default_delay_seconds: float = Field(
        default=0.25,
        ge=0,
        description="Delay window used when DebounceConfig.delay_seconds is not given"
    )


class LightFnSettings(BaseModel):
    """Root settings for lightfn."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    clone: CloneConfig = Field(default_factory=CloneConfig)
    debounce: DebounceSettings = Field(default_factory=DebounceSettings)


_settings: Optional[LightFnSettings] = None
_settings_lock = threading.Lock()


def get_settings() -> LightFnSettings:
    """Return the loaded settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = ConfigLoader(config_class=LightFnSettings).load()
            logger.debug(f"Loaded settings: {_settings.model_dump()}")
        return _settings


def reset_settings() -> None:
    """Forget cached settings so the next access reloads them."""
    global _settings
    with _settings_lock:
        _settings = None
