"""
Task Relay (trelay) - Callback-driven control flow primitives

Coordinates single-threaded, continuation-passing work with:
- A sequential Runner that hands each task a continuation
- A countdown Barrier with fail-fast or error-accumulating policy
- YAML pipeline files resolved into Runner tasks
"""

from .barrier import Barrier, BarrierOptions, BarrierPolicy, BarrierState, make_barrier
from .errors import InvalidArgument, SignalError, TaskError
from .runners import Runner, RunnerStatus

__version__ = "0.1.0"
__package_name__ = "task-relay"
__short_name__ = "trelay"

__all__ = [
    "Barrier",
    "BarrierOptions",
    "BarrierPolicy",
    "BarrierState",
    "make_barrier",
    "InvalidArgument",
    "SignalError",
    "TaskError",
    "Runner",
    "RunnerStatus",
]
