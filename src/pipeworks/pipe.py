"""Pipe: a named, immutable sequence of steps compiled into one callable.

    run = (
        pipe("numbers")
        .step("double", lambda n: n * 2)
        .step("inc", map(lambda n: n + 1))
        .build()
    )
    run(3)  # 7

If any step is async, ``build()`` returns a coroutine function instead:

    run = pipe("users").step("load", load_user).step("render", render).build()
    await run(42)

Pipes are copy-on-append: ``.step()`` returns a new Pipe and never touches
the one it was called on. ``build()`` closes over the current step tuple, so
a compiled function is unaffected by steps added afterwards.

The engine has no error recovery. An exception raised by a step reaches the
caller of the compiled function as-is, and an ``Err`` returned by a step is
passed to the next step like any other value.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, overload

from pipeworks._types import StepFn
from pipeworks.context import RunContext
from pipeworks.errors import InvalidStepError
from pipeworks.metadata import (
    Operator,
    StepMetadata,
    callable_name,
    is_async_callable,
    unwrap_value,
)
from pipeworks.tracer import Tracer

logger = logging.getLogger(__name__)

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741
R = TypeVar("R")


@dataclass(frozen=True)
class Step:
    """A registered step.

    Attributes:
        key: Unique identifier generated at registration.
        description: Caller-supplied description.
        fn: The callable as given to ``Pipe.step()``.
        metadata: Name, operator tag and async flag.
    """

    key: str
    description: str
    fn: StepFn
    metadata: StepMetadata

    def info(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "description": self.description,
            "name": self.metadata.name,
            "operator": self.metadata.operator,
            "is_async": self.metadata.is_async,
        }


def _register(description: str, fn: Any, is_async: bool | None) -> Step:
    if not callable(fn):
        raise InvalidStepError(description, fn)

    # Metadata already attached by an operator wins over any declaration.
    if isinstance(fn, Operator):
        metadata = fn.metadata
    else:
        metadata = StepMetadata(
            name=callable_name(fn),
            operator="function",
            is_async=is_async if is_async is not None else is_async_callable(fn),
        )

    return Step(key=uuid.uuid4().hex[:12], description=description, fn=fn, metadata=metadata)


# --- Execution engine ---


def _identity(value: Any) -> Any:
    return value


async def _resolve_members(result: Any) -> Any:
    # One level deep only: values bound by ``bind`` with an async function,
    # or a step that returns a list of coroutines.
    if isinstance(result, dict):
        if any(inspect.isawaitable(v) for v in result.values()):
            return {k: (await v if inspect.isawaitable(v) else v) for k, v in result.items()}
    elif type(result) in (list, tuple):
        if any(inspect.isawaitable(v) for v in result):
            items = [await v if inspect.isawaitable(v) else v for v in result]
            return items if isinstance(result, list) else tuple(items)
    return result


async def _settle(result: Any) -> Any:
    """Await a step result, strip its envelope and resolve awaitable members."""
    if inspect.isawaitable(result):
        result = await result
    result = unwrap_value(result)
    if inspect.isawaitable(result):
        result = await result
    return await _resolve_members(result)


def _compile_sync(steps: tuple[Step, ...]) -> Callable[[Any], Any]:
    def run(value: Any) -> Any:
        current = value
        for s in steps:
            current = unwrap_value(s.fn(current))
        return current

    return run


def _compile_async(steps: tuple[Step, ...]) -> Callable[[Any], Awaitable[Any]]:
    async def run(value: Any) -> Any:
        current = value
        for s in steps:
            current = await _settle(s.fn(current))
        return current

    return run


def _compile_sync_traced(
    name: str, steps: tuple[Step, ...], tracer: Tracer, metadata: Mapping[str, Any]
) -> Callable[[Any], Any]:
    def run(value: Any) -> Any:
        ctx = RunContext.for_run(name, steps, is_async=False, metadata=metadata)
        tracer.on_pipe_start(ctx)
        current = value
        try:
            for s in steps:
                timing = ctx.start_step(s)
                tracer.on_step_start(ctx, s.description, current)
                try:
                    current = unwrap_value(s.fn(current))
                except Exception as e:
                    timing.finish(error=e)
                    tracer.on_step_error(ctx, s.description, e)
                    raise
                timing.finish()
                tracer.on_step_end(ctx, s.description, current)
        finally:
            tracer.on_pipe_end(ctx)
        return current

    return run


def _compile_async_traced(
    name: str, steps: tuple[Step, ...], tracer: Tracer, metadata: Mapping[str, Any]
) -> Callable[[Any], Awaitable[Any]]:
    async def run(value: Any) -> Any:
        ctx = RunContext.for_run(name, steps, is_async=True, metadata=metadata)
        tracer.on_pipe_start(ctx)
        current = value
        try:
            for s in steps:
                timing = ctx.start_step(s)
                tracer.on_step_start(ctx, s.description, current)
                try:
                    current = await _settle(s.fn(current))
                except Exception as e:
                    timing.finish(error=e)
                    tracer.on_step_error(ctx, s.description, e)
                    raise
                timing.finish()
                tracer.on_step_end(ctx, s.description, current)
        finally:
            tracer.on_pipe_end(ctx)
        return current

    return run


# --- Builder ---


class Pipe(Generic[I, O]):
    """Immutable pipe builder.

    Create one with :func:`pipe`, add steps with :meth:`step`, inspect them
    with :meth:`steps`, and compile with :meth:`build`.
    """

    def __init__(
        self,
        name: str,
        steps: tuple[Step, ...] = (),
        tracer: Tracer | None = None,
        run_metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._name = name
        self._steps = steps
        self._tracer = tracer
        self._run_metadata = dict(run_metadata or {})

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_async(self) -> bool:
        """True if any step is async, i.e. ``build()`` yields a coroutine function."""
        return any(s.metadata.is_async for s in self._steps)

    @overload
    def step(
        self,
        description: str,
        fn: Callable[[O], Awaitable[R]],
        *,
        is_async: bool | None = None,
    ) -> Pipe[I, R]: ...

    @overload
    def step(
        self,
        description: str,
        fn: Callable[[O], R],
        *,
        is_async: bool | None = None,
    ) -> Pipe[I, R]: ...

    def step(
        self,
        description: str,
        fn: Callable[[O], Any],
        *,
        is_async: bool | None = None,
    ) -> Pipe[I, Any]:
        """Return a new pipe with *fn* appended.

        Args:
            description: Human-readable description of the step.
            fn: A plain callable or an operator (``map``, ``bind``, ...).
            is_async: Declares whether *fn* returns an awaitable. Inferred
                from how *fn* was defined when omitted. Ignored for operators,
                which carry their own metadata.

        Raises:
            InvalidStepError: If *fn* is not callable.
        """
        new_step = _register(description, fn, is_async)
        logger.debug("pipe %r: registered step %r as %s", self._name, description, new_step.metadata)
        return Pipe(self._name, self._steps + (new_step,), self._tracer, self._run_metadata)

    def steps(self) -> dict[str, Any]:
        """Snapshot of the pipe's name and step metadata."""
        return {"name": self._name, "steps": [s.info() for s in self._steps]}

    def use(self, tracer: Tracer, *, metadata: Mapping[str, Any] | None = None) -> Pipe[I, O]:
        """Return a new pipe that reports each run to *tracer*.

        *metadata* seeds ``RunContext.metadata`` of every traced run (a fresh
        copy per run). Empty pipes are traced too: the tracer sees a run
        with no steps.
        """
        return Pipe(self._name, self._steps, tracer, metadata)

    def build(self) -> Callable[[I], Any]:
        """Compile the steps into a single function.

        Returns the identity function for an empty untraced pipe, a plain
        function when every step is sync, and a coroutine function otherwise.
        """
        steps = self._steps
        if not steps and self._tracer is None:
            return _identity

        run_async = self.is_async
        logger.debug(
            "pipe %r: compiled %d step(s) [%s]", self._name, len(steps), "async" if run_async else "sync"
        )

        if self._tracer is not None:
            if run_async:
                return _compile_async_traced(self._name, steps, self._tracer, self._run_metadata)
            return _compile_sync_traced(self._name, steps, self._tracer, self._run_metadata)

        if run_async:
            return _compile_async(steps)
        return _compile_sync(steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        chain = " >> ".join(s.description for s in self._steps)
        return f"Pipe({self._name!r}: {chain})" if chain else f"Pipe({self._name!r})"


def pipe(name: str) -> Pipe[Any, Any]:
    """Create an empty pipe named *name*."""
    return Pipe(name)
