from __future__ import annotations

import functools

import pytest

from pipeworks import Operator, PipeValue, StepMetadata, err, infer_kind, map, nothing, ok, some
from pipeworks.metadata import callable_name, is_async_callable, unwrap_value
from tests.conftest import async_double, double


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (1, "primitive"),
        ("s", "primitive"),
        (None, "primitive"),
        (True, "primitive"),
        (1.5, "primitive"),
        ([1, 2], "array"),
        ((1, 2), "array"),
        ({"a": 1}, "object"),
        (object(), "object"),
        (ok(1), "result"),
        (err("e"), "result"),
        (some(1), "option"),
        (nothing(), "option"),
    ],
)
def test_infer_kind(value, kind) -> None:  # type: ignore[no-untyped-def]
    assert infer_kind(value) == kind


def test_pipe_value_is_tagged() -> None:
    value = map(double)(4)
    assert isinstance(value, PipeValue)
    assert value.tag == "Value"
    assert value.operator == "map"
    assert value.kind == "primitive"
    assert value.value == 8


def test_unwrap_value() -> None:
    assert unwrap_value(map(double)(2)) == 4
    assert unwrap_value(3) == 3


class AsyncCallable:
    async def __call__(self, x: int) -> int:
        return x


class SyncCallable:
    def __call__(self, x: int) -> int:
        return x


class Handler:
    def __init__(self, value: int) -> None:
        self.value = value

    async def __call__(self) -> int:
        return self.value


def test_is_async_callable() -> None:
    assert is_async_callable(async_double)
    assert is_async_callable(functools.partial(async_double))
    assert is_async_callable(AsyncCallable())
    assert not is_async_callable(double)
    assert not is_async_callable(SyncCallable())
    assert not is_async_callable(lambda x: x)
    assert not is_async_callable(Handler)
    assert is_async_callable(Handler(1))


def test_is_async_callable_reads_operator_metadata() -> None:
    declared = Operator(fn=double, metadata=StepMetadata(name="double", is_async=True))
    assert is_async_callable(declared)


def test_callable_name() -> None:
    assert callable_name(double) == "double"
    assert callable_name(functools.partial(double)) == "double"
    assert callable_name(SyncCallable()) == "SyncCallable"
    assert callable_name(lambda x: x) == "<lambda>"
