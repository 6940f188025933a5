"""Left-to-right function composition.

``pipe(f1, f2, ..., fn)`` builds a unary callable that threads its argument
through every stage in order, so ``pipe(f1, f2, f3)(x) == f3(f2(f1(x)))``.

The composed callable runs synchronously on the caller's thread. When a stage
returns an awaitable the pipe does not await it; the awaitable itself becomes
the next stage's input. Use :func:`lightfn.promise.bind_p` on the following
stage to wait for it.
"""

import logging
from functools import reduce
from typing import Any, Callable, TypeVar, overload

from .errors import PipeUsageError

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")
F = TypeVar("F")
G = TypeVar("G")
H = TypeVar("H")
I = TypeVar("I")  # noqa: E741

Stage = Callable[[Any], Any]


@overload
def pipe(f1: Callable[[A], B]) -> Callable[[A], B]: ...


@overload
def pipe(f1: Callable[[A], B], f2: Callable[[B], C]) -> Callable[[A], C]: ...


@overload
def pipe(
    f1: Callable[[A], B], f2: Callable[[B], C], f3: Callable[[C], D]
) -> Callable[[A], D]: ...


@overload
def pipe(
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
) -> Callable[[A], E]: ...


@overload
def pipe(
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
) -> Callable[[A], F]: ...


@overload
def pipe(
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
) -> Callable[[A], G]: ...


@overload
def pipe(
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
    f7: Callable[[G], H],
) -> Callable[[A], H]: ...


@overload
def pipe(
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
    f7: Callable[[G], H],
    f8: Callable[[H], I],
) -> Callable[[A], I]: ...


@overload
def pipe(*stages: Stage) -> Stage: ...


def pipe(*stages: Stage) -> Stage:
    """Compose unary callables left to right.

    Args:
        *stages: One or more unary callables. Each stage receives the
            previous stage's return value.

    Returns:
        A unary callable taking the first stage's input and returning the
        last stage's output. The stages are available as ``.stages``.

    Raises:
        PipeUsageError: If no stages are given or a stage is not callable.
    """
    if not stages:
        raise PipeUsageError("pipe() requires at least one function")

    for position, stage in enumerate(stages):
        if not callable(stage):
            raise PipeUsageError(
                f"pipe() stage {position} is not callable: {stage!r}",
                position=position,
                stage_type=type(stage).__name__,
            )

    first, *rest = stages

    def piped(value: Any) -> Any:
        # Stage errors propagate as if the calls were written out by hand
        seed = first(value)
        return reduce(lambda acc, stage: stage(acc), rest, seed)

    names = ", ".join(_stage_name(stage) for stage in stages)
    piped.__name__ = piped.__qualname__ = f"pipe({names})"
    piped.stages = stages

    logger.debug(
        f"Built pipe with {len(stages)} stage(s)",
        extra={"extra_fields": {"stages": names}},
    )
    return piped


def _stage_name(stage: Stage) -> str:
    return getattr(stage, "__qualname__", None) or getattr(stage, "__name__", None) or repr(stage)
