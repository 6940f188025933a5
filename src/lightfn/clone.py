"""Recursive cloning of structured values.

Strategies, tried in order:

1. Primitives (see :func:`lightfn.functional.is_primitive`) and class
   objects are returned as-is.
2. Pending values (futures and other awaitables) are assumed immutable and
   returned by reference.
3. Objects whose type defines a ``clone()`` method (:class:`Cloneable`)
   clone themselves.
4. Lists, tuples and named tuples are cloned element by element.
5. Plain data records (exact dicts, dataclass instances and pydantic models,
   including their extra fields) are cloned field by field. Dict subclasses
   are not plain records.
6. Anything else is copied by reference with a warning, or rejected with
   :class:`UncloneableError`, depending on ``CloneConfig.on_unknown``.

Cyclic structures raise :class:`CyclicReferenceError`.
"""

import concurrent.futures
import dataclasses
import inspect
import logging
from typing import Any, Dict, Optional, Protocol, Set, TypeVar, runtime_checkable

from pydantic import BaseModel

from .errors import CyclicReferenceError, UncloneableError
from .functional import is_primitive
from .settings import CloneConfig, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class Cloneable(Protocol):
    """Value that knows how to produce an independent copy of itself."""

    def clone(self) -> Any:
        ...


def is_cloneable(value: Any) -> bool:
    """Check whether a value provides its own ``clone()`` method.

    The method is looked up on the type, so records with a data field named
    ``clone`` and class objects defining ``clone`` do not qualify.
    """
    if isinstance(value, type):
        return False
    return callable(getattr(type(value), "clone", None))


def is_pending(value: Any) -> bool:
    """Check whether a value represents a deferred computation."""
    return inspect.isawaitable(value) or isinstance(value, concurrent.futures.Future)


class DeepCloner:
    """Single-use helper carrying the cycle-detection state of one clone."""

    def __init__(self, config: CloneConfig) -> None:
        self.config = config
        self._active: Set[int] = set()

    def clone(self, value: Any) -> Any:
        """Clone ``value`` and everything reachable from it."""
        # Classes are shared like primitives
        if is_primitive(value) or is_pending(value) or isinstance(value, type):
            return value

        if is_cloneable(value):
            return value.clone()

        if type(value) in (list, tuple) or _is_namedtuple(value):
            return self._enter(value, self._clone_sequence)

        if type(value) is dict:
            return self._enter(value, self._clone_dict)

        if dataclasses.is_dataclass(value):
            return self._enter(value, self._clone_dataclass)

        if isinstance(value, BaseModel):
            return self._enter(value, self._clone_model)

        return self._clone_unknown(value)

    def _enter(self, value: Any, strategy: Any) -> Any:
        marker = id(value)
        if marker in self._active:
            raise CyclicReferenceError(
                f"Cannot clone cyclic structure: {type(value).__name__} contains itself",
                value_type=type(value).__name__,
            )

        self._active.add(marker)
        try:
            return strategy(value)
        finally:
            self._active.discard(marker)

    def _clone_sequence(self, value: Any) -> Any:
        items = [self.clone(item) for item in value]
        if type(value) is list:
            return items
        if type(value) is tuple:
            return tuple(items)
        return type(value)._make(items)

    def _clone_dict(self, value: Dict[Any, Any]) -> Dict[Any, Any]:
        return {key: self.clone(item) for key, item in value.items()}

    def _clone_dataclass(self, value: Any) -> Any:
        changes = {
            field.name: self.clone(getattr(value, field.name))
            for field in dataclasses.fields(value)
            if field.init
        }
        return dataclasses.replace(value, **changes)

    def _clone_model(self, value: BaseModel) -> BaseModel:
        changes = {
            name: self.clone(getattr(value, name))
            for name in type(value).model_fields
        }
        copied = value.model_copy(update=changes)
        if value.__pydantic_extra__:
            extra = {key: self.clone(item) for key, item in value.__pydantic_extra__.items()}
            object.__setattr__(copied, "__pydantic_extra__", extra)
        return copied

    def _clone_unknown(self, value: Any) -> Any:
        value_type = type(value).__name__

        if self.config.on_unknown == "error":
            raise UncloneableError(
                f"No cloning strategy for {value_type}",
                value_type=value_type,
            )

        logger.warning(
            f"No cloning strategy for {value_type}, copying by reference",
            extra={"extra_fields": {"value_type": value_type}},
        )
        return value


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields") and hasattr(type(value), "_make")


def deep_clone(value: T, config: Optional[CloneConfig] = None) -> T:
    """Recursively copy a structured value.

    Args:
        value: Value to clone
        config: Clone behaviour; defaults to the ``clone`` section of the
            loaded settings

    Returns:
        A copy sharing no mutable containers with ``value``, apart from
        values copied by reference (pending values and, under the ``warn``
        policy, unknown kinds)

    Raises:
        UncloneableError: If an unknown kind is met and the policy is ``error``
        CyclicReferenceError: If the structure references itself
    """
    if config is None:
        config = get_settings().clone
    return DeepCloner(config).clone(value)
