"""Per-invocation record of a traced pipe run.

A :class:`RunContext` is created for every call of a compiled pipe that has
a tracer attached. It knows the pipe's shape (step count, sync or async) and
collects one :class:`StepTiming` per executed step, carrying the step's key
and operator tag so a trace can be matched back to ``Pipe.steps()``.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pipeworks.pipe import Step


@dataclass
class StepTiming:
    """One step execution inside a traced run."""

    key: str
    description: str
    operator: str
    is_async: bool
    position: int
    started_at: float
    ended_at: float | None = None
    error: BaseException | None = None

    @property
    def duration_ms(self) -> float | None:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at) * 1000

    def finish(self, error: BaseException | None = None) -> None:
        self.ended_at = time.monotonic()
        self.error = error

    def as_dict(self) -> dict[str, Any]:
        duration = self.duration_ms
        return {
            "key": self.key,
            "description": self.description,
            "operator": self.operator,
            "is_async": self.is_async,
            "duration_ms": round(duration, 2) if duration is not None else None,
            "error": repr(self.error) if self.error is not None else None,
        }


@dataclass
class RunContext:
    """Execution record for one call of a compiled pipe.

    Attributes:
        pipe_name: Name of the pipe being executed.
        step_count: Number of steps the compiled pipe will run.
        is_async: Whether the compiled pipe is a coroutine function.
        metadata: Copy of the mapping given to ``Pipe.use(..., metadata=...)``.
            Tracers may add to it during the run.
        run_id: Unique identifier for this invocation.
        timings: Executed steps, in order.
    """

    pipe_name: str = ""
    step_count: int = 0
    is_async: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timings: list[StepTiming] = field(default_factory=list)

    @classmethod
    def for_run(
        cls,
        pipe_name: str,
        steps: tuple[Step, ...],
        *,
        is_async: bool,
        metadata: Mapping[str, Any] | None = None,
    ) -> RunContext:
        return cls(
            pipe_name=pipe_name,
            step_count=len(steps),
            is_async=is_async,
            metadata=dict(metadata or {}),
        )

    def start_step(self, step: Step) -> StepTiming:
        """Open a timing record for *step* and return it for later ``finish()``."""
        timing = StepTiming(
            key=step.key,
            description=step.description,
            operator=step.metadata.operator,
            is_async=step.metadata.is_async,
            position=len(self.timings) + 1,
            started_at=time.monotonic(),
        )
        self.timings.append(timing)
        return timing

    @property
    def current(self) -> StepTiming | None:
        """The most recently started step, if any."""
        return self.timings[-1] if self.timings else None

    @property
    def completed(self) -> bool:
        """True when every step ran and none failed."""
        return len(self.timings) == self.step_count and not self.failed_steps

    @property
    def total_duration_ms(self) -> float:
        return sum(t.duration_ms or 0.0 for t in self.timings)

    @property
    def failed_steps(self) -> list[StepTiming]:
        return [t for t in self.timings if t.error is not None]

    def summary(self) -> dict[str, Any]:
        """Plain-dict view of the run, for log records."""
        return {
            "run_id": self.run_id,
            "pipe": self.pipe_name,
            "mode": "async" if self.is_async else "sync",
            "completed": self.completed,
            "total_duration_ms": round(self.total_duration_ms, 2),
            "metadata": dict(self.metadata),
            "steps": [t.as_dict() for t in self.timings],
        }
