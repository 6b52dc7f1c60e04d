"""Shared step functions and fixtures for pipeworks tests."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest


def double(n: int) -> int:
    return n * 2


def inc(n: int) -> int:
    return n + 1


def to_string(n: int) -> str:
    return str(n)


async def async_double(n: int) -> int:
    await asyncio.sleep(0)
    return n * 2


async def async_inc(n: int) -> int:
    await asyncio.sleep(0)
    return n + 1


def always_fail(x: Any) -> Any:
    raise ValueError("intentional failure")


async def async_always_fail(x: Any) -> Any:
    await asyncio.sleep(0)
    raise ValueError("intentional async failure")


class RecordingTracer:
    """Tracer that keeps every event it receives."""

    def __init__(self) -> None:
        self.started = False
        self.ended = False
        self.step_starts: list[str] = []
        self.step_ends: list[tuple[str, Any]] = []
        self.errors: list[BaseException] = []
        self.contexts: list[Any] = []

    def on_pipe_start(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.started = True
        self.contexts.append(ctx)

    def on_pipe_end(self, ctx) -> None:  # type: ignore[no-untyped-def]
        self.ended = True

    def on_step_start(self, ctx, description, input_data):  # type: ignore[no-untyped-def]
        self.step_starts.append(description)

    def on_step_end(self, ctx, description, result):  # type: ignore[no-untyped-def]
        self.step_ends.append((description, result))

    def on_step_error(self, ctx, description, error):  # type: ignore[no-untyped-def]
        self.errors.append(error)


@pytest.fixture
def tracer() -> RecordingTracer:
    return RecordingTracer()
