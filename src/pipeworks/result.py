"""Result type: a success or a failure, never both.

Steps return ``Result`` values like any other data. The pipe engine does not
inspect them, so callers that want to stop on failure check ``is_err``
after each step:

    result = validate(user)
    if is_err(result):
        return result
    return ok(save(result.value))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeGuard, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True


Result = Union[Ok[T], Err[E]]


def ok(value: T) -> Ok[T]:
    """Wrap *value* as a successful Result."""
    return Ok(value)


def err(error: E) -> Err[E]:
    """Wrap *error* as a failed Result."""
    return Err(error)


def is_ok(result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)


def is_result(value: Any) -> TypeGuard[Result[Any, Any]]:
    """True when *value* is an ``Ok`` or an ``Err``."""
    return isinstance(value, (Ok, Err))


def unwrap(result: Result[T, E]) -> T | E:
    """Return the payload of either variant.

    Does not raise on ``Err``: the error payload is returned as-is.
    """
    if isinstance(result, Ok):
        return result.value
    return result.error


# Historical aliases.
success = ok
fail = err
is_success = is_ok
is_fail = is_err
