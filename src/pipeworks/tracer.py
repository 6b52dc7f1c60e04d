"""Tracer protocol and built-in tracers.

Tracers are opt-in. A pipe with no tracer attached runs silently.
Custom tracers implement the Tracer protocol, no base class inheritance required.

Hooks are plain (non-async) methods: the same tracer has to work inside
synchronous pipes, which never touch an event loop. While a step hook runs,
``ctx.current`` is the :class:`~pipeworks.context.StepTiming` of that step.
"""

from __future__ import annotations

import logging
import reprlib
import sys
from typing import Any, Protocol, TextIO, runtime_checkable

from pipeworks.context import RunContext


@runtime_checkable
class Tracer(Protocol):
    """Protocol for pipe tracers.

    Using Protocol (not ABC) so any object with matching methods works.
    """

    def on_pipe_start(self, ctx: RunContext) -> None: ...
    def on_pipe_end(self, ctx: RunContext) -> None: ...
    def on_step_start(self, ctx: RunContext, description: str, input_data: Any) -> None: ...
    def on_step_end(self, ctx: RunContext, description: str, result: Any) -> None: ...
    def on_step_error(self, ctx: RunContext, description: str, error: BaseException) -> None: ...


class NullTracer:
    """Tracer that ignores every event."""

    def on_pipe_start(self, ctx: RunContext) -> None:
        pass

    def on_pipe_end(self, ctx: RunContext) -> None:
        pass

    def on_step_start(self, ctx: RunContext, description: str, input_data: Any) -> None:
        pass

    def on_step_end(self, ctx: RunContext, description: str, result: Any) -> None:
        pass

    def on_step_error(self, ctx: RunContext, description: str, error: BaseException) -> None:
        pass


_preview = reprlib.Repr()
_preview.maxstring = 60
_preview.maxother = 60
_preview.maxlist = _preview.maxtuple = _preview.maxdict = 6


def _step_label(ctx: RunContext, description: str) -> str:
    timing = ctx.current
    if timing is None:
        return description
    mode = " async" if timing.is_async else ""
    return f"[{timing.position}/{ctx.step_count}] {description} ({timing.operator}{mode})"


class StdoutTracer:
    """Human-readable trace on a text stream (stderr unless told otherwise).

    Usage:
        run = pipe("my-pipe").step("double", double).use(StdoutTracer()).build()

    With ``verbose=True`` each step line also shows the value it received.
    """

    def __init__(self, verbose: bool = False, stream: TextIO | None = None) -> None:
        self.verbose = verbose
        self.stream = stream

    def _write(self, line: str) -> None:
        print(line, file=self.stream or sys.stderr)

    def on_pipe_start(self, ctx: RunContext) -> None:
        mode = "async" if ctx.is_async else "sync"
        self._write(f"▶ {ctx.pipe_name} [{mode}, {ctx.step_count} steps, run={ctx.run_id}]")

    def on_pipe_end(self, ctx: RunContext) -> None:
        status = "✓" if ctx.completed else "✗"
        done = len(ctx.timings) - len(ctx.failed_steps)
        self._write(
            f"{status} {ctx.pipe_name} {done}/{ctx.step_count} steps "
            f"in {ctx.total_duration_ms:.1f}ms"
        )

    def on_step_start(self, ctx: RunContext, description: str, input_data: Any) -> None:
        line = f"  → {_step_label(ctx, description)}"
        if self.verbose:
            line += f" <- {_preview.repr(input_data)}"
        self._write(line)

    def on_step_end(self, ctx: RunContext, description: str, result: Any) -> None:
        timing = ctx.current
        ms = f" {timing.duration_ms:.1f}ms" if timing and timing.duration_ms is not None else ""
        line = f"  ✓ {description}{ms}"
        if self.verbose:
            line += f" -> {_preview.repr(result)}"
        self._write(line)

    def on_step_error(self, ctx: RunContext, description: str, error: BaseException) -> None:
        self._write(f"  ✗ {description}: {error!r}")


class LoggingTracer:
    """Tracer that writes records through the ``logging`` module.

    Step events go out at *level*; step failures always at ERROR, with the
    step key and operator in ``extra`` so handlers can filter on them.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.logger = logger or logging.getLogger("pipeworks.trace")
        self.level = level

    def _extra(self, ctx: RunContext) -> dict[str, Any]:
        timing = ctx.current
        return {
            "pipe": ctx.pipe_name,
            "run_id": ctx.run_id,
            "step_key": timing.key if timing else None,
            "operator": timing.operator if timing else None,
        }

    def on_pipe_start(self, ctx: RunContext) -> None:
        self.logger.log(
            self.level,
            "pipe %r started [run=%s, %d steps]",
            ctx.pipe_name,
            ctx.run_id,
            ctx.step_count,
            extra={"pipe": ctx.pipe_name, "run_id": ctx.run_id},
        )

    def on_pipe_end(self, ctx: RunContext) -> None:
        self.logger.log(self.level, "pipe %r finished: %s", ctx.pipe_name, ctx.summary())

    def on_step_start(self, ctx: RunContext, description: str, input_data: Any) -> None:
        self.logger.log(
            self.level,
            "[%s] %s input=%s",
            ctx.run_id,
            _step_label(ctx, description),
            _preview.repr(input_data),
            extra=self._extra(ctx),
        )

    def on_step_end(self, ctx: RunContext, description: str, result: Any) -> None:
        self.logger.log(
            self.level,
            "[%s] step %r result=%s",
            ctx.run_id,
            description,
            _preview.repr(result),
            extra=self._extra(ctx),
        )

    def on_step_error(self, ctx: RunContext, description: str, error: BaseException) -> None:
        self.logger.error(
            "[%s] step %r failed: %r", ctx.run_id, description, error, extra=self._extra(ctx)
        )
