"""Internal type aliases used across the package."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Union

# A step function: (input) -> output, or (input) -> awaitable output.
# Kept loose on purpose; typing across steps is carried by Pipe's generics.
StepFn = Callable[[Any], Union[Any, Awaitable[Any]]]
