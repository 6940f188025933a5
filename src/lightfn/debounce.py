"""Debounced function wrappers.

A debounced function collapses a burst of calls into a single invocation.
By default the invocation happens on the trailing edge, ``delay_seconds``
after the last call of the burst, using that call's arguments. With
``immediate=True`` it happens on the leading edge instead: the first call
runs right away and the rest of the burst is dropped.

Trailing invocations run on a daemon ``threading.Timer`` thread.
"""

import functools
import logging
import threading
import types
from typing import Any, Callable, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .errors import DebounceConfigError
from .settings import get_settings

logger = logging.getLogger(__name__)


class DebounceConfig(BaseModel):
    """Options for :func:`debounce`."""

    model_config = ConfigDict(extra='forbid')

    delay_seconds: Optional[float] = Field(
        default=None,
        ge=0,
        description="Quiet period before the call fires (default: settings debounce.default_delay_seconds)"
    )
    immediate: StrictBool = Field(
        default=False,
        description="Fire on the first call of a burst instead of after the last one"
    )
    fn: Optional[Callable[..., Any]] = Field(
        default=None,
        description="Function to debounce; when omitted debounce() returns a decorator"
    )


class Debounced:
    """Callable wrapper that debounces calls to ``fn``.

    Used as a method decorator it binds per instance: each instance gets its
    own bound ``Debounced``, cached in the instance ``__dict__``, so bursts
    on one instance collapse without affecting other instances.
    """

    def __init__(self, fn: Callable[..., Any], delay_seconds: float, immediate: bool = False) -> None:
        self.fn = fn
        self.delay_seconds = delay_seconds
        self.immediate = immediate

        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._pending_call: Optional[Tuple[Tuple[Any, ...], Dict[str, Any]]] = None
        self._attr_name: Optional[str] = getattr(fn, "__name__", None)

        functools.update_wrapper(self, fn, updated=())

    def __call__(self, *args: Any, **kwargs: Any) -> threading.Timer:
        """Schedule a call, restarting the delay window.

        Returns:
            Timer handle for this call; ``handle.cancel()`` drops it
        """
        with self._lock:
            call_now = self.immediate and not self._armed()

            if self._timer is not None:
                self._timer.cancel()

            self._generation += 1
            timer = threading.Timer(self.delay_seconds, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            self._pending_call = None if self.immediate else (args, kwargs)
            timer.start()

        if call_now:
            self.fn(*args, **kwargs)

        return timer

    def __set_name__(self, owner: Type[Any], name: str) -> None:
        self._attr_name = name

    def __get__(self, instance: Any, owner: Optional[Type[Any]] = None) -> "Debounced":
        if instance is None:
            return self

        instance_dict = getattr(instance, "__dict__", None)
        if instance_dict is None or self._attr_name is None:
            raise DebounceConfigError(
                f"Cannot debounce method on {type(instance).__name__}: instances need a __dict__",
                owner=type(instance).__name__,
            )

        bound = Debounced(types.MethodType(self.fn, instance), self.delay_seconds, self.immediate)
        # Later lookups find the cached wrapper before this non-data descriptor
        instance_dict[self._attr_name] = bound
        return bound

    @property
    def pending(self) -> bool:
        """True while a delay window is open."""
        with self._lock:
            return self._armed()

    def cancel(self) -> None:
        """Drop any pending invocation and close the delay window."""
        with self._lock:
            self._disarm()

    def flush(self) -> Any:
        """Run a pending trailing invocation now.

        Returns:
            The function's result, or None when nothing was pending
        """
        with self._lock:
            if not self._armed():
                return None
            call = self._pending_call
            self._disarm()

        if call is None:
            return None
        args, kwargs = call
        return self.fn(*args, **kwargs)

    def _armed(self) -> bool:
        return self._timer is not None and not self._timer.finished.is_set()

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending_call = None
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer call or a cancel() superseded this timer
            if generation != self._generation:
                return
            call = self._pending_call
            self._timer = None
            self._pending_call = None

        if call is None:
            return

        args, kwargs = call
        try:
            self.fn(*args, **kwargs)
        except Exception:
            logger.exception(
                f"Debounced call to {getattr(self.fn, '__qualname__', self.fn)!s} failed",
                extra={"extra_fields": {"delay_seconds": self.delay_seconds}},
            )
            raise

    def __repr__(self) -> str:
        return (
            f"Debounced({self.fn!r}, delay_seconds={self.delay_seconds}, "
            f"immediate={self.immediate})"
        )


def debounce(
    config: Optional[DebounceConfig] = None, **options: Any
) -> Union[Debounced, Callable[[Callable[..., Any]], Debounced]]:
    """Debounce a function.

    Either pass a :class:`DebounceConfig` or the same fields as keyword
    options, not both.

    Args:
        config: Debounce options
        **options: ``delay_seconds``, ``immediate`` and ``fn``, used to
            build a DebounceConfig when ``config`` is omitted

    Returns:
        A :class:`Debounced` wrapper when a target ``fn`` is configured,
        otherwise a decorator producing one

    Raises:
        DebounceConfigError: If the options are malformed

    Examples:
        >>> save = debounce(fn=write_file, delay_seconds=0.5)
        >>> @debounce(delay_seconds=0.1, immediate=True)
        ... def on_click(event): ...
    """
    if config is not None and options:
        raise DebounceConfigError(
            "Pass either a DebounceConfig or keyword options, not both",
            options=sorted(options),
        )

    if config is None:
        try:
            config = DebounceConfig(**options)
        except ValidationError as e:
            raise DebounceConfigError(f"Invalid debounce options: {e}", errors=e.errors()) from e
    elif not isinstance(config, DebounceConfig):
        raise DebounceConfigError(
            f"debounce() expects a DebounceConfig, got {type(config).__name__}",
            config_type=type(config).__name__,
        )

    delay_seconds = config.delay_seconds
    if delay_seconds is None:
        delay_seconds = get_settings().debounce.default_delay_seconds

    immediate = config.immediate

    if config.fn is not None:
        return Debounced(config.fn, delay_seconds, immediate)

    def decorator(fn: Callable[..., Any]) -> Debounced:
        if not callable(fn):
            raise DebounceConfigError(
                f"debounce() decorator applied to non-callable {type(fn).__name__}",
                fn_type=type(fn).__name__,
            )
        return Debounced(fn, delay_seconds, immediate)

    return decorator
