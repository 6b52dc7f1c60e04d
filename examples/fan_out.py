"""Fan-out with parallel/all and sequencing with flow, traced to stderr."""

from __future__ import annotations

import asyncio

from pipeworks import StdoutTracer, all, flow, parallel, pipe


async def fetch_price(sku: str) -> float:
    await asyncio.sleep(0.05)
    return {"apple": 1.2, "pear": 0.8}.get(sku, 0.0)


async def fetch_stock(sku: str) -> int:
    await asyncio.sleep(0.01)
    return {"apple": 12, "pear": 0}.get(sku, 0)


price = pipe("Price").step("fetch price", fetch_price)
stock = pipe("Stock").step("fetch stock", fetch_stock)
label = pipe("Label").step("format", lambda row: f"{row[0]:.2f} EUR, {row[1]} left")


async def main() -> None:
    by_index = parallel(price, stock).build()
    print("parallel:", await by_index(["apple", "pear"]))

    product = flow(all(price, stock), label).use(StdoutTracer(verbose=True)).build()
    print("flow:", await product("apple"))


if __name__ == "__main__":
    asyncio.run(main())
