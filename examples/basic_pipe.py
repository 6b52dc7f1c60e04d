"""Minimal pipeworks example."""

from __future__ import annotations

from pipeworks import chain, map, pipe, tap


def double(x: int) -> int:
    return x * 2


def add_one(x: int) -> int:
    return x + 1


def main() -> None:
    run = (
        pipe("basic")
        .step("double", double)
        .step("log", tap(lambda x: print("after double:", x)))
        .step("add one", map(add_one))
        .build()
    )
    print("Result:", run(3))

    shout = chain("shout", str.strip, str.upper).build()
    print("Chain:", shout("  hello  "))


if __name__ == "__main__":
    main()
