"""Combinators over built pipes: parallel, all, flow.

Each combinator compiles the pipes it receives when it is called and
returns a new Pipe, so the result can be stepped, traced, nested in another
combinator or built like any other pipe.

Fan-out (``parallel``, ``all``) runs on the event loop with
``asyncio.gather`` when any pipe is async, and as a plain loop otherwise.
Results always come back in declaration order, whatever order the pipes
finish in. There are no threads and no cancellation: the first exception
raised by any pipe reaches the caller unmodified.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Sequence
from typing import Any

from pipeworks.errors import FanOutInputError
from pipeworks.pipe import Pipe, pipe


def _any_async(pipes: Sequence[Pipe[Any, Any]]) -> bool:
    return any(p.is_async for p in pipes)


async def _run_lifted(run: Callable[[Any], Any], value: Any) -> Any:
    result = run(value)
    if inspect.isawaitable(result):
        return await result
    return result


def _indexed(value: Any, count: int) -> list[Any]:
    """Split *value* across *count* pipes.

    A list or tuple is matched by index; anything else is broadcast.
    """
    if isinstance(value, (list, tuple)):
        if len(value) != count:
            raise FanOutInputError(count, len(value))
        return list(value)
    return [value] * count


def _broadcast(value: Any, count: int) -> list[Any]:
    return [value] * count


def _fan_out(
    name: str,
    pipes: Sequence[Pipe[Any, Any]],
    split: Callable[[Any, int], list[Any]],
) -> Pipe[Any, list[Any]]:
    runners = [p.build() for p in pipes]
    description = " and ".join(p.name for p in pipes)

    if _any_async(pipes):

        async def fan_out(value: Any) -> list[Any]:
            inputs = split(value, len(runners))
            results = await asyncio.gather(
                *(_run_lifted(run, inp) for run, inp in zip(runners, inputs, strict=True))
            )
            return list(results)

        return pipe(name).step(description, fan_out, is_async=True)

    def fan_out_sync(value: Any) -> list[Any]:
        inputs = split(value, len(runners))
        return [run(inp) for run, inp in zip(runners, inputs, strict=True)]

    return pipe(name).step(description, fan_out_sync, is_async=False)


def parallel(*pipes: Pipe[Any, Any]) -> Pipe[Any, list[Any]]:
    """Run each pipe on its own input.

    The built pipe takes a list (or tuple) whose item ``i`` goes to
    ``pipes[i]`` and returns the list of outputs in the same order. A
    non-sequence input is given to every pipe.

        run = parallel(double, square, stringify).build()
        await run([5, 10, 200])  # [10, 100, "200"]

    Raises (at call time):
        FanOutInputError: If the input sequence length differs from the
            number of pipes.
    """
    return _fan_out("Parallel", pipes, _indexed)


def all(*pipes: Pipe[Any, Any]) -> Pipe[Any, list[Any]]:  # noqa: A001
    """Run every pipe on the same input; outputs are listed in pipe order.

        run = all(double, stringify).build()
        await run(5)  # [10, "5"]
    """
    return _fan_out("All in parallel", pipes, _broadcast)


def flow(*pipes: Pipe[Any, Any]) -> Pipe[Any, Any]:
    """Thread one value through each pipe in turn.

    The output of pipe N is the input of pipe N+1. If any pipe is async the
    whole flow is async and sync pipes are awaited alongside it.

    Input and output types are not inferred across pipes: the resulting
    pipe is ``Pipe[Any, Any]``.
    """
    result: Pipe[Any, Any] = pipe("Flow in sequence")
    for p in pipes:
        result = result.step(p.name, p.build(), is_async=p.is_async)
    return result
