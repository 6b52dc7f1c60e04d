"""chain: build a pipe from plain functions.

    trim_upper = chain("clean", str.strip, str.upper)
    trim_upper.build()("  hi  ")  # "HI"

Each function becomes a ``map`` step described by its ``__name__``.

The overloads below let a static type checker verify that every function
accepts what the previous one returns, for up to eight functions. Nothing
is checked at runtime: a mismatch slipped past the type checker (with
``cast`` or ``# type: ignore``) fails only when the offending step runs.

Async functions are awaited before their output reaches the next
function; the overloads do not model that, so a chain that mixes in
``async def`` functions needs the catch-all signature or a cast.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, overload

from pipeworks.metadata import callable_name
from pipeworks.operators import map as map_operator
from pipeworks.pipe import Pipe, pipe

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")
F = TypeVar("F")
G = TypeVar("G")
H = TypeVar("H")
J = TypeVar("J")


@overload
def chain(name: str, f1: Callable[[A], B], /) -> Pipe[A, B]: ...


@overload
def chain(name: str, f1: Callable[[A], B], f2: Callable[[B], C], /) -> Pipe[A, C]: ...


@overload
def chain(
    name: str, f1: Callable[[A], B], f2: Callable[[B], C], f3: Callable[[C], D], /
) -> Pipe[A, D]: ...


@overload
def chain(
    name: str,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    /,
) -> Pipe[A, E]: ...


@overload
def chain(
    name: str,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    /,
) -> Pipe[A, F]: ...


@overload
def chain(
    name: str,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
    /,
) -> Pipe[A, G]: ...


@overload
def chain(
    name: str,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
    f7: Callable[[G], H],
    /,
) -> Pipe[A, H]: ...


@overload
def chain(
    name: str,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], E],
    f5: Callable[[E], F],
    f6: Callable[[F], G],
    f7: Callable[[G], H],
    f8: Callable[[H], J],
    /,
) -> Pipe[A, J]: ...


@overload
def chain(name: str, /, *fns: Callable[[Any], Any]) -> Pipe[Any, Any]: ...


def chain(name: str, /, *fns: Callable[[Any], Any]) -> Pipe[Any, Any]:
    result: Pipe[Any, Any] = pipe(name)
    for fn in fns:
        result = result.step(callable_name(fn), map_operator(fn))
    return result
