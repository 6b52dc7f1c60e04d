"""Option type: a value that may or may not be present."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeGuard, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Some(Generic[T]):
    """Presence of a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Nothing:
    """Absence of a value. All instances compare equal."""


Option = Union[Some[T], Nothing]


def some(value: T) -> Some[T]:
    return Some(value)


def nothing() -> Nothing:
    return Nothing()


def is_some(option: Option[T]) -> TypeGuard[Some[T]]:
    return isinstance(option, Some)


def is_nothing(option: Option[T]) -> TypeGuard[Nothing]:
    return isinstance(option, Nothing)


def is_option(value: Any) -> TypeGuard[Option[Any]]:
    return isinstance(value, (Some, Nothing))
