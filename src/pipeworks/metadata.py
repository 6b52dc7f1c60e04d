"""Step metadata, the PipeValue envelope, and the Operator pair.

Operators never mutate the user's function. Each one returns an
``Operator``: the wrapped callable plus the ``StepMetadata`` that describes
it. ``Pipe.step()`` reads that metadata instead of re-inferring it.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from pipeworks.option import Nothing, Some
from pipeworks.result import Err, Ok

ValueKind = Literal["primitive", "object", "array", "result", "option"]

_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)


@dataclass(frozen=True)
class StepMetadata:
    """Describes a step function. Computed once, when the step is registered.

    Attributes:
        name: Function name, or the operator name for anonymous callables.
        operator: Operator tag (``"map"``, ``"tap"``, ...) or ``"function"``.
        is_async: Whether calling the function returns an awaitable.
    """

    name: str
    operator: str = "function"
    is_async: bool = False


@dataclass(frozen=True)
class PipeValue:
    """Tagged envelope returned by operators.

    The pipe engine replaces it with ``value`` between steps, so step
    functions only ever see plain values.
    """

    value: Any
    operator: str
    kind: ValueKind
    tag: Literal["Value"] = field(default="Value", init=False)


@dataclass(frozen=True)
class Operator:
    """A step function paired with its metadata.

    Calling an Operator calls the wrapped function, so operators can be used
    on their own as well as inside a pipe.
    """

    fn: Callable[[Any], Any]
    metadata: StepMetadata

    def __call__(self, value: Any) -> Any:
        return self.fn(value)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def is_async(self) -> bool:
        return self.metadata.is_async


def infer_kind(value: Any) -> ValueKind:
    """Classify *value* structurally."""
    if isinstance(value, (Ok, Err)):
        return "result"
    if isinstance(value, (Some, Nothing)):
        return "option"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, _PRIMITIVES):
        return "primitive"
    return "object"


def pipe_value(value: Any, operator: str) -> PipeValue:
    return PipeValue(value=value, operator=operator, kind=infer_kind(value))


def unwrap_value(value: Any) -> Any:
    """Strip a PipeValue envelope; anything else is returned unchanged."""
    if isinstance(value, PipeValue):
        return value.value
    return value


def is_async_callable(fn: Any) -> bool:
    """True when *fn* was constructed as a coroutine function.

    Looks through ``functools.partial`` and at ``__call__`` of callable
    instances. A class is never async: calling it only builds an instance.
    A plain function that happens to return an awaitable is not detected;
    declare it with ``is_async=True`` instead.
    """
    if isinstance(fn, Operator):
        return fn.is_async
    while isinstance(fn, functools.partial):
        fn = fn.func
    if inspect.iscoroutinefunction(fn):
        return True
    # Calling a class constructs an instance; its ``__call__`` is not involved.
    if isinstance(fn, type):
        return False
    call = getattr(fn, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def callable_name(fn: Any) -> str:
    while isinstance(fn, functools.partial):
        fn = fn.func
    return getattr(fn, "__name__", None) or type(fn).__name__
