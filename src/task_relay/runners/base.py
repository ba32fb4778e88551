"""Base runner types and argument validation."""

from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from ..errors import InvalidArgument

Continuation = Callable[..., None]  # (error=None) -> None
Task = Callable[[Continuation], Any]
FinalCallback = Callable[..., Any]  # (error=None) -> None


class RunnerStatus(Enum):
    """Lifecycle of a runner."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if the final callback has already fired."""
        return self in (RunnerStatus.COMPLETED, RunnerStatus.FAILED)


def validate_tasks(tasks: Any) -> tuple[Task, ...]:
    """
    Check that tasks is an ordered, indexable sequence of callables.

    Lazy iterables are rejected because positions must be addressable
    directly, and strings because their items are not tasks.

    Args:
        tasks: Candidate task sequence

    Returns:
        The tasks as a tuple, detached from the caller's container

    Raises:
        InvalidArgument: If tasks is not a sequence or holds a non-callable
    """
    if isinstance(tasks, (str, bytes, bytearray)) or not isinstance(tasks, Sequence):
        raise InvalidArgument(f"Runner must be created with an indexable sequence of tasks, got {type(tasks).__name__}")

    for index, task in enumerate(tasks):
        if not callable(task):
            raise InvalidArgument(f"Task at position {index} is not callable: {task!r}")

    return tuple(tasks)
