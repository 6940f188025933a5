"""Lightweight functional utilities."""

from .functional import empty_fn, identity, echo, zip_lists, is_primitive
from .pipe import pipe
from .promise import bind_p, BoundP, resolve
from .debounce import debounce, Debounced, DebounceConfig
from .clone import deep_clone, Cloneable, DeepCloner, is_cloneable, is_pending
from .config import ConfigLoader
from .settings import LightFnSettings, CloneConfig, DebounceSettings, get_settings, reset_settings
from .logging import setup_logging, configure_logging, LogContext
from .logging_config import LoggingConfig
from .types import Pojo, JSONValue, JSONObject, ReducerAction, Reducer, Dispatch
from .errors import (
    LightFnError, UsageError, PipeUsageError, DebounceConfigError,
    CloneError, UncloneableError, CyclicReferenceError, ConfigurationError
)

__version__ = "0.1.0"

__all__ = [
    'empty_fn',
    'identity',
    'echo',
    'zip_lists',
    'is_primitive',
    'pipe',
    'bind_p',
    'BoundP',
    'resolve',
    'debounce',
    'Debounced',
    'DebounceConfig',
    'deep_clone',
    'Cloneable',
    'DeepCloner',
    'is_cloneable',
    'is_pending',
    'ConfigLoader',
    'LightFnSettings',
    'CloneConfig',
    'DebounceSettings',
    'get_settings',
    'reset_settings',
    'setup_logging',
    'configure_logging',
    'LogContext',
    'LoggingConfig',
    'Pojo',
    'JSONValue',
    'JSONObject',
    'ReducerAction',
    'Reducer',
    'Dispatch',
    'LightFnError',
    'UsageError',
    'PipeUsageError',
    'DebounceConfigError',
    'CloneError',
    'UncloneableError',
    'CyclicReferenceError',
    'ConfigurationError',
]
