"""Sequential runner - Drives continuation-passing tasks one at a time."""

import logging

from ..errors import InvalidArgument
from .base import FinalCallback, RunnerStatus, Task, validate_tasks

logger = logging.getLogger(__name__)


class Runner:
    """
    Sequential task runner.

    Each task is called with the runner's bound ``advance`` method as its only
    argument and must call it exactly once when done, optionally with an
    error. The runner is reachable from inside a task as
    ``continuation.__self__``.

    The final callback fires exactly once: ``callback(error)`` on the first
    error, ``callback()`` once every task has continued without one.
    """

    def __init__(self, tasks, callback: FinalCallback):
        """
        Initialize the runner.

        Args:
            tasks: Ordered, indexable sequence of task callables
            callback: Called once with an error, or with no argument on success

        Raises:
            InvalidArgument: If tasks is not a sequence of callables or
                callback is not callable
        """
        self._tasks = validate_tasks(tasks)
        if not callable(callback):
            raise InvalidArgument("Runner must be created with a callable callback")

        self._callback = callback
        self._cursor = 0
        self._status = RunnerStatus.PENDING
        # Set while a task is being called, so a synchronous continuation
        # resumes the dispatch loop instead of recursing into it.
        self._dispatching = False
        self._resume = False

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def callback(self) -> FinalCallback:
        return self._callback

    @property
    def cursor(self) -> int:
        """Position of the next task to dispatch."""
        return self._cursor

    @property
    def status(self) -> RunnerStatus:
        return self._status

    def start(self) -> None:
        """Dispatch the first task. Must be called at most once."""
        if self._status is not RunnerStatus.PENDING:
            logger.warning(f"Runner already started (status: {self._status.value}), ignoring start()")
            return

        self._status = RunnerStatus.RUNNING
        logger.debug(f"Starting runner with {len(self._tasks)} task(s)")

        if not self._tasks:
            self._finish()
            return

        self._dispatch()

    def advance(self, error=None) -> None:
        """
        Continuation handed to every task.

        Args:
            error: Any truthy value fails the runner and is passed to the
                final callback; no further tasks run
        """
        if self._status.is_terminal():
            logger.warning(f"Continuation called after runner {self._status.value}, ignoring")
            return

        if error:
            self._finish(error)
            return

        if self._cursor >= len(self._tasks):
            self._finish()
            return

        if self._dispatching:
            self._resume = True
            return

        self._dispatch()

    def _dispatch(self) -> None:
        """Run tasks from the cursor until one returns without continuing."""
        while True:
            index = self._cursor
            task = self._tasks[index]
            self._cursor += 1
            self._resume = False

            logger.debug(f"Dispatching task {index + 1}/{len(self._tasks)}: {getattr(task, '__name__', task)!r}")

            self._dispatching = True
            try:
                task(self.advance)
            except Exception as e:
                self._dispatching = False
                self._resume = False
                if self._status.is_terminal():
                    # Raised by the final callback, or by the task after it continued.
                    raise
                logger.exception(f"Task {index + 1} raised instead of continuing")
                self._finish(e)
                return
            finally:
                self._dispatching = False

            if not self._resume or self._status.is_terminal():
                return

    def _finish(self, error=None) -> None:
        """Mark the runner terminal and fire the final callback."""
        if error:
            self._status = RunnerStatus.FAILED
            logger.info(f"Runner failed at task {self._cursor}/{len(self._tasks)}: {error}")
            self._callback(error)
        else:
            self._status = RunnerStatus.COMPLETED
            logger.info(f"Runner completed {len(self._tasks)} task(s)")
            self._callback()
