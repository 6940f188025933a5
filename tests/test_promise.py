"""Tests for bind_p() awaitable lifting."""

import asyncio

import pytest

from lightfn import bind_p, BoundP, UsageError, pipe


def add3(x):
    return x + 3


async def resolved(value):
    return value


class Counter:
    """Object whose methods are lifted with bind_p."""

    def __init__(self, a):
        self.a = a

    @bind_p
    def add(self, b):
        return self.a + b

    @bind_p
    async def add_later(self, b):
        await asyncio.sleep(0)
        return self.a + b


class TestBindP:
    """Tests for bind_p()."""

    @pytest.mark.asyncio
    async def test_lifts_plain_function(self):
        """Test that a plain function accepts an awaitable."""
        assert await bind_p(add3)(resolved(2)) == 5

    @pytest.mark.asyncio
    async def test_accepts_future(self):
        """Test that an asyncio future is awaited before the call."""
        future = asyncio.get_running_loop().create_future()
        future.set_result(2)
        assert await bind_p(add3)(future) == 5

    @pytest.mark.asyncio
    async def test_accepts_plain_value(self):
        """Test that a non-awaitable input is used directly."""
        assert await bind_p(add3)(2) == 5

    @pytest.mark.asyncio
    async def test_flattens_coroutine_result(self):
        """Test that an awaitable returned by fn is awaited too."""

        async def add3_async(x):
            return x + 3

        assert await bind_p(add3_async)(resolved(2)) == 5

    @pytest.mark.asyncio
    async def test_preserves_instance_context(self):
        """Test that methods see their instance across the await."""
        counter = Counter(1)
        assert await counter.add(resolved(2)) == 3

    @pytest.mark.asyncio
    async def test_preserves_context_per_instance(self):
        """Test that each instance binds independently."""
        first, second = Counter(1), Counter(10)
        results = await asyncio.gather(first.add_later(resolved(2)), second.add_later(resolved(2)))
        assert results == [3, 12]

    @pytest.mark.asyncio
    async def test_assigned_on_plain_object_class(self):
        """Test context preservation for a BoundP assigned as class attribute."""

        class Obj:
            a = 1
            fn = bind_p(lambda self, b: self.a + b)

        assert await Obj().fn(resolved(2)) == 3

    def test_class_access_returns_descriptor(self):
        """Test that reading from the class gives the BoundP itself."""
        assert isinstance(Counter.add, BoundP)

    @pytest.mark.asyncio
    async def test_input_error_propagates(self):
        """Test that a failing input awaitable propagates its error."""

        async def failing():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await bind_p(add3)(failing())

    @pytest.mark.asyncio
    async def test_function_error_propagates(self):
        """Test that an error raised by fn propagates unmodified."""
        boom = RuntimeError("boom")

        def fail(x):
            raise boom

        with pytest.raises(RuntimeError) as exc_info:
            await bind_p(fail)(resolved(1))

        assert exc_info.value is boom

    def test_rejects_non_callable(self):
        """Test that lifting a non-callable is a usage error."""
        with pytest.raises(UsageError):
            bind_p(42)

    def test_keeps_wrapped_metadata(self):
        """Test that name and docstring are carried over."""

        def documented(x):
            """Add nothing."""
            return x

        lifted = bind_p(documented)
        assert lifted.__name__ == "documented"
        assert lifted.__doc__ == "Add nothing."
        assert lifted.__wrapped__ is documented

    @pytest.mark.asyncio
    async def test_sequences_async_stage_inside_pipe(self):
        """Test composing an async stage with bind_p'd sync stages."""

        async def fetch(x):
            await asyncio.sleep(0)
            return x + 1

        xform = pipe(fetch, bind_p(add3), bind_p(str))
        assert await xform(1) == "5"
