"""Operator factories: map, from_, tap, bind, if_then, if_then_else.

Each factory turns a user function into an ``Operator``. Calling the
operator returns a ``PipeValue`` tagged with the operator name; inside a pipe
the engine unwraps it before the next step.

    >>> double = map(lambda n: n * 2)
    >>> double(5).value
    10

An operator built from an ``async def`` function is itself a coroutine
function, except ``bind``: it stores the un-awaited result under its key and
leaves resolution to the pipe engine. Plain functions that return awaitables
can be declared with ``is_async=True``.

None of the operators catch exceptions or retry.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pipeworks.metadata import (
    Operator,
    StepMetadata,
    callable_name,
    is_async_callable,
    pipe_value,
)

logger = logging.getLogger(__name__)


def _resolve_async(declared: bool | None, *fns: Callable[..., Any]) -> bool:
    if declared is not None:
        return declared
    return any(is_async_callable(fn) for fn in fns)


def _operator(operator: str, name: str, apply: Callable[[Any], Any], is_async: bool) -> Operator:
    metadata = StepMetadata(name=name, operator=operator, is_async=is_async)
    logger.debug("created operator %s", metadata)
    return Operator(fn=apply, metadata=metadata)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _transform(operator: str, fn: Callable[[Any], Any], is_async: bool | None) -> Operator:
    run_async = _resolve_async(is_async, fn)

    if run_async:

        async def apply(value: Any) -> Any:
            return pipe_value(await _maybe_await(fn(value)), operator)

    else:

        def apply(value: Any) -> Any:
            return pipe_value(fn(value), operator)

    return _operator(operator, callable_name(fn), apply, run_async)


def map(fn: Callable[[Any], Any], *, is_async: bool | None = None) -> Operator:
    """Apply *fn* to the input and pass its output along.

    Usage:
        pipe("len").step("length", map(len)).build()("abc")  # 3
    """
    return _transform("map", fn, is_async)


def from_(fn: Callable[[Any], Any], *, is_async: bool | None = None) -> Operator:
    """Same contract as :func:`map`. Marks the first step of a pipe."""
    return _transform("from", fn, is_async)


def tap(fn: Callable[[Any], Any], *, is_async: bool | None = None) -> Operator:
    """Call *fn* for its side effect and pass the original input along.

    The return value of *fn* is discarded. An async *fn* is awaited before
    the input is passed on.
    """
    run_async = _resolve_async(is_async, fn)

    if run_async:

        async def apply(value: Any) -> Any:
            await _maybe_await(fn(value))
            return pipe_value(value, "tap")

    else:

        def apply(value: Any) -> Any:
            fn(value)
            return pipe_value(value, "tap")

    return _operator("tap", callable_name(fn), apply, run_async)


def bind(key: str, fn: Callable[[Any], Any], *, is_async: bool | None = None) -> Operator:
    """Merge ``{key: fn(input)}`` into the input mapping.

    A non-mapping input (number, string, list, None) is dropped: the output
    is ``{key: fn(input)}`` alone. The input mapping is copied, never
    mutated.

    With an async *fn* the stored value is the coroutine itself; the pipe
    engine awaits it when the step returns.

        >>> bind("age", lambda user: 25)({"name": "John"}).value
        {'name': 'John', 'age': 25}
    """
    run_async = _resolve_async(is_async, fn)

    def apply(value: Any) -> Any:
        merged = dict(value) if isinstance(value, Mapping) else {}
        merged[key] = fn(value)
        return pipe_value(merged, "bind")

    return _operator("bind", callable_name(fn), apply, run_async)


def if_then(
    condition: Callable[[Any], Any],
    then: Callable[[Any], Any],
    *,
    is_async: bool | None = None,
) -> Operator:
    """Return ``then(input)`` when ``condition(input)`` is truthy, else None."""
    run_async = _resolve_async(is_async, condition, then)

    if run_async:

        async def apply(value: Any) -> Any:
            if await _maybe_await(condition(value)):
                return pipe_value(await _maybe_await(then(value)), "if_then")
            return pipe_value(None, "if_then")

    else:

        def apply(value: Any) -> Any:
            return pipe_value(then(value) if condition(value) else None, "if_then")

    return _operator("if_then", callable_name(then), apply, run_async)


def if_then_else(
    condition: Callable[[Any], Any],
    then: Callable[[Any], Any],
    otherwise: Callable[[Any], Any],
    *,
    is_async: bool | None = None,
) -> Operator:
    """Return ``then(input)`` or ``otherwise(input)`` depending on ``condition(input)``.

    Only the selected branch is called, so ``otherwise`` may raise:

        safe_div = if_then_else(
            lambda ab: ab[1] != 0,
            lambda ab: ab[0] / ab[1],
            _raise_division_by_zero,
        )
    """
    run_async = _resolve_async(is_async, condition, then, otherwise)

    if run_async:

        async def apply(value: Any) -> Any:
            branch = then if await _maybe_await(condition(value)) else otherwise
            return pipe_value(await _maybe_await(branch(value)), "if_then_else")

    else:

        def apply(value: Any) -> Any:
            branch = then if condition(value) else otherwise
            return pipe_value(branch(value), "if_then_else")

    return _operator("if_then_else", callable_name(then), apply, run_async)
