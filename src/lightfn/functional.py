"""Small functional helpers.

Stuff that is needed everywhere but is not worth pulling in a bigger
functional-programming library for.
"""

from enum import Enum
from typing import Any, List, Sequence, Tuple, TypeVar

T = TypeVar("T")
U = TypeVar("U")

PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def empty_fn(*args: Any, **kwargs: Any) -> None:
    """No-op. Swallows all arguments and returns nothing."""


def identity(x: T) -> T:
    """Return the argument unchanged, preserving its type."""
    return x


def echo(x: Any) -> Any:
    """Return the argument unchanged. Unlike :func:`identity` the type is not preserved."""
    return x


def zip_lists(a: Sequence[T], b: Sequence[U]) -> List[Tuple[T, U]]:
    """Pair two sequences element-wise.

    The result is truncated to the length of the shorter sequence.

    Examples:
        >>> zip_lists(['a', 'b'], [1, 2, 3])
        [('a', 1), ('b', 2)]
    """
    length = min(len(a), len(b))
    return [(a[i], b[i]) for i in range(length)]


def is_primitive(value: Any) -> bool:
    """Check whether a value is of a basic, non-structured kind.

    Primitives are None, booleans, numbers, strings, bytes and enum members.
    They are immutable, so they can be shared instead of copied.
    """
    return isinstance(value, PRIMITIVE_TYPES) or isinstance(value, Enum)
