"""pipeworks: composable sync/async pipes over a small Result type."""

from pipeworks.chain import chain
from pipeworks.combinators import all, flow, parallel
from pipeworks.context import RunContext, StepTiming
from pipeworks.errors import FanOutInputError, InvalidStepError, PipeworksError
from pipeworks.metadata import Operator, PipeValue, StepMetadata, infer_kind
from pipeworks.operators import bind, from_, if_then, if_then_else, map, tap
from pipeworks.option import Nothing, Option, Some, is_nothing, is_option, is_some, nothing, some
from pipeworks.pipe import Pipe, Step, pipe
from pipeworks.result import (
    Err,
    Ok,
    Result,
    err,
    fail,
    is_err,
    is_fail,
    is_ok,
    is_result,
    is_success,
    ok,
    success,
    unwrap,
)
from pipeworks.tracer import LoggingTracer, NullTracer, StdoutTracer, Tracer

__version__ = "0.1.0"

__all__ = [
    "pipe",
    "Pipe",
    "Step",
    "StepMetadata",
    "PipeValue",
    "Operator",
    "infer_kind",
    "map",
    "from_",
    "tap",
    "bind",
    "if_then",
    "if_then_else",
    "parallel",
    "all",
    "flow",
    "chain",
    "Ok",
    "Err",
    "Result",
    "ok",
    "err",
    "success",
    "fail",
    "is_ok",
    "is_err",
    "is_success",
    "is_fail",
    "is_result",
    "unwrap",
    "Some",
    "Nothing",
    "Option",
    "some",
    "nothing",
    "is_some",
    "is_nothing",
    "is_option",
    "RunContext",
    "StepTiming",
    "Tracer",
    "NullTracer",
    "StdoutTracer",
    "LoggingTracer",
    "PipeworksError",
    "InvalidStepError",
    "FanOutInputError",
]
