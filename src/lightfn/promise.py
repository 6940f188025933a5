"""Lift plain functions into the awaitable world.

Awaitables are not strictly a monad (awaiting flattens nested awaitables),
but they are close enough that a monadic bind makes composing async and sync
steps straightforward.
"""

import functools
import inspect
import types
from typing import Any, Awaitable, Callable, Generic, Optional, Type, TypeVar, Union

from .errors import UsageError

T = TypeVar("T")
U = TypeVar("U")


async def resolve(value: Union[T, Awaitable[T]]) -> T:
    """Await ``value`` when it is awaitable, otherwise return it as-is."""
    if inspect.isawaitable(value):
        return await value
    return value


class BoundP(Generic[T, U]):
    """Async callable produced by :func:`bind_p`.

    Acts as a descriptor so a ``BoundP`` stored on a class binds the
    wrapped function to the instance it is read from, just like a plain
    method.
    """

    def __init__(self, fn: Callable[..., Union[U, Awaitable[U]]]) -> None:
        if not callable(fn):
            raise UsageError(
                f"bind_p() expects a callable, got {type(fn).__name__}",
                fn_type=type(fn).__name__,
            )
        self.fn = fn
        functools.update_wrapper(self, fn, updated=())

    async def __call__(self, pending: Union[T, Awaitable[T]]) -> U:
        value = await resolve(pending)
        return await resolve(self.fn(value))

    def __get__(self, instance: Any, owner: Optional[Type[Any]] = None) -> "BoundP[T, U]":
        if instance is None:
            return self
        return BoundP(types.MethodType(self.fn, instance))

    def __repr__(self) -> str:
        return f"bind_p({self.fn!r})"


def bind_p(fn: Callable[..., Union[U, Awaitable[U]]]) -> BoundP[Any, U]:
    """Lift ``fn`` so it takes an awaitable and returns a coroutine.

    The input is awaited before ``fn`` runs, and an awaitable returned by
    ``fn`` is awaited too, so callers always get a single level of awaiting.

    Args:
        fn: Function (or coroutine function) of one argument. When the
            result is stored as a class attribute, ``fn`` receives the
            instance as its first argument.

    Returns:
        Async callable mapping ``Awaitable[T]`` to ``U``.

    Raises:
        UsageError: If ``fn`` is not callable.

    Examples:
        >>> import asyncio
        >>> add3 = bind_p(lambda x: x + 3)
        >>> asyncio.run(add3(asyncio.sleep(0, result=2)))
        5
    """
    return BoundP(fn)
