"""Result-returning steps with the caller deciding when to stop."""

from __future__ import annotations

import logging
from typing import Any

from pipeworks import LoggingTracer, Result, bind, err, is_err, ok, pipe

logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def validate(user: dict[str, Any]) -> Result[dict[str, Any], str]:
    if not user.get("name"):
        return err("name is required")
    return ok(user)


check = (
    pipe("Check")
    .step("validate", validate)
    .use(LoggingTracer(), metadata={"source": "signup-form"})
    .build()
)
enrich = pipe("Enrich").step("greeting", bind("greeting", lambda u: f"Hi {u['name']}")).build()


def register(user: dict[str, Any]) -> Result[dict[str, Any], str]:
    result = check(user)
    if is_err(result):
        return result
    return ok(enrich(result.value))


if __name__ == "__main__":
    print(register({"name": "Ada"}))
    print(register({}))
