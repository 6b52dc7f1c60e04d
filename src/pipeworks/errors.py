"""Package exceptions. Minimal set: exceptions raised by step functions pass through unmodified."""


class PipeworksError(Exception):
    """Base exception for all pipeworks errors."""

    pass


class InvalidStepError(PipeworksError, TypeError):
    """Raised when a step is registered with something that is not callable.

    Attributes:
        description: Description the step was registered under.
    """

    def __init__(self, description: str, fn: object) -> None:
        self.description = description
        super().__init__(
            f"Step '{description}' requires a callable, got {type(fn).__name__}."
        )


class FanOutInputError(PipeworksError, ValueError):
    """Raised when a ``parallel`` pipe gets a sequence of the wrong length.

    Attributes:
        expected: Number of pipes in the fan-out.
        received: Length of the input sequence.
    """

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(f"inputs length ({received}) != pipes length ({expected})")
