from __future__ import annotations

import asyncio
import inspect

import pytest

from pipeworks import (
    InvalidStepError,
    PipeValue,
    bind,
    err,
    is_err,
    map,
    ok,
    pipe,
    tap,
)
from tests.conftest import (
    always_fail,
    async_always_fail,
    async_double,
    async_inc,
    double,
    inc,
    to_string,
)


def test_sync_pipe() -> None:
    run = pipe("t").step("double", lambda n: n * 2).step("inc", lambda n: n + 1).build()
    assert run(3) == 7


@pytest.mark.parametrize("value", [0, "x", None, [1, 2], {"a": 1}, ok(1)])
def test_empty_pipe_is_identity(value) -> None:  # type: ignore[no-untyped-def]
    assert pipe("empty").build()(value) is value


def test_sync_pipe_never_returns_awaitable() -> None:
    run = pipe("sync").step("double", double).step("str", map(to_string)).build()
    assert not inspect.iscoroutinefunction(run)
    result = run(4)
    assert not inspect.isawaitable(result)
    assert result == "8"


@pytest.mark.asyncio
async def test_async_pipe_matches_manual_await_chain() -> None:
    p = pipe("async").step("double", async_double).step("inc", inc).step("inc2", async_inc)
    run = p.build()

    assert p.is_async is True
    assert inspect.iscoroutinefunction(run)
    assert await run(5) == await async_inc(inc(await async_double(5)))


@pytest.mark.asyncio
async def test_declared_async_step() -> None:
    run = pipe("declared").step("double", lambda n: async_double(n), is_async=True).build()
    assert await run(21) == 42


def test_operators_are_unwrapped_between_steps() -> None:
    seen: list[object] = []
    run = (
        pipe("ops")
        .step("double", map(double))
        .step("record", tap(seen.append))
        .step("inc", inc)
        .build()
    )
    assert run(5) == 11
    assert seen == [10]
    assert not isinstance(seen[0], PipeValue)


def test_bind_chain_in_pipe() -> None:
    run = (
        pipe("user")
        .step("add age", bind("age", lambda _: 25))
        .step("add id", bind("id", lambda _: 1))
        .step("double age", map(lambda u: {**u, "age": u["age"] * 2}))
        .build()
    )
    assert run({"name": "John"}) == {"name": "John", "age": 50, "id": 1}


@pytest.mark.asyncio
async def test_engine_resolves_async_bind() -> None:
    async def fetch_age(user: dict) -> int:
        await asyncio.sleep(0)
        return 25

    run = pipe("user").step("fetch age", bind("age", fetch_age)).step("snapshot", dict).build()
    assert await run({"name": "John"}) == {"name": "John", "age": 25}


def test_steps_snapshot() -> None:
    p = pipe("meta").step("double", double).step("map inc", map(inc))
    snapshot = p.steps()

    assert snapshot["name"] == "meta"
    assert [s["description"] for s in snapshot["steps"]] == ["double", "map inc"]
    assert snapshot["steps"][0]["operator"] == "function"
    assert snapshot["steps"][0]["name"] == "double"
    assert snapshot["steps"][1]["operator"] == "map"
    assert all(s["is_async"] is False for s in snapshot["steps"])
    assert snapshot["steps"][0]["key"] != snapshot["steps"][1]["key"]


def test_empty_pipe_snapshot() -> None:
    assert pipe("empty").steps() == {"name": "empty", "steps": []}


def test_operator_metadata_wins_over_declaration() -> None:
    p = pipe("first").step("double", map(double), is_async=True)
    assert p.steps()["steps"][0]["is_async"] is False
    assert p.is_async is False


def test_step_metadata_is_not_recomputed() -> None:
    p = pipe("keys").step("double", double)
    key = p.steps()["steps"][0]["key"]
    longer = p.step("inc", inc)
    assert longer.steps()["steps"][0]["key"] == key


def test_step_returns_new_pipe() -> None:
    base = pipe("base").step("double", double)
    longer = base.step("inc", inc)

    assert len(base) == 1
    assert len(longer) == 2
    assert base.build()(5) == 10
    assert longer.build()(5) == 11


def test_build_is_not_affected_by_later_steps() -> None:
    base = pipe("base").step("double", double)
    run = base.build()
    base.step("fail", always_fail)
    assert run(2) == 4


def test_exception_propagates_unmodified() -> None:
    boom = RuntimeError("boom")

    def explode(_: int) -> int:
        raise boom

    run = pipe("err").step("double", double).step("explode", explode).build()
    with pytest.raises(RuntimeError) as exc:
        run(1)
    assert exc.value is boom


@pytest.mark.asyncio
async def test_async_exception_propagates_unmodified() -> None:
    run = pipe("err").step("double", async_double).step("fail", async_always_fail).build()
    with pytest.raises(ValueError, match="intentional async failure"):
        await run(1)


def test_err_result_is_passed_to_next_step() -> None:
    seen: list[object] = []

    def record(value: object) -> object:
        seen.append(value)
        return value

    run = pipe("results").step("reject", lambda _: err("invalid")).step("record", record).build()
    result = run(1)

    assert is_err(result)
    assert seen == [err("invalid")]


def test_non_callable_step_rejected() -> None:
    with pytest.raises(InvalidStepError) as exc:
        pipe("bad").step("number", 42)  # type: ignore[call-overload]
    assert isinstance(exc.value, TypeError)
    assert exc.value.description == "number"


def test_pipe_repr() -> None:
    assert repr(pipe("p")) == "Pipe('p')"
    assert repr(pipe("p").step("a", double).step("b", inc)) == "Pipe('p': a >> b)"


async def fetch(n: int) -> int:
    await asyncio.sleep(0)
    return n * 10


@pytest.mark.asyncio
async def test_engine_resolves_list_of_awaitables() -> None:
    run = pipe("fetch").step("start", fetch).step("fan", lambda n: [fetch(1), fetch(n), 3]).build()
    assert await run(2) == [10, 200, 3]


@pytest.mark.asyncio
async def test_engine_resolves_tuple_of_awaitables() -> None:
    run = pipe("fetch").step("start", fetch).step("pair", lambda n: (fetch(1), n)).build()
    result = await run(1)
    assert result == (10, 10)
    assert isinstance(result, tuple)


@pytest.mark.asyncio
async def test_engine_resolves_one_level_only() -> None:
    run = (
        pipe("nested")
        .step("start", async_double)
        .step("wrap", lambda n: {"n": n, "inner": {"later": fetch(n)}})
        .build()
    )
    result = await run(1)

    assert result["n"] == 2
    nested = result["inner"]["later"]
    assert inspect.iscoroutine(nested)
    assert await nested == 20


@pytest.mark.asyncio
async def test_engine_leaves_nested_list_awaitables() -> None:
    run = pipe("nested").step("start", fetch).step("wrap", lambda n: [[fetch(n)]]).build()
    result = await run(1)

    nested = result[0][0]
    assert inspect.iscoroutine(nested)
    assert await nested == 100


class Box:
    def __init__(self, value: int) -> None:
        self.value = value

    async def __call__(self) -> int:
        return self.value


def test_class_with_async_call_is_a_sync_step() -> None:
    p = pipe("wrap").step("wrap", Box).step("get", lambda b: b.value)
    run = p.build()

    assert p.is_async is False
    out = run(3)
    assert not inspect.isawaitable(out)
    assert out == 3
