"""
Countdown barrier - Fire a callback after a fixed number of signals.

Two policies are supported:
- FAIL_FAST: the first signal carrying an error fires the callback with it
- ACCUMULATE: all errors are collected and reported after the last signal
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import InvalidArgument

logger = logging.getLogger(__name__)


class BarrierPolicy(Enum):
    """How a barrier treats errors."""

    FAIL_FAST = "fail_fast"
    ACCUMULATE = "accumulate"


class BarrierState(Enum):
    """State of a barrier."""

    WAITING = "waiting"
    TERMINAL = "terminal"


@dataclass
class BarrierOptions:
    """Options for make_barrier."""

    accumulate_errors: bool = False

    @property
    def policy(self) -> BarrierPolicy:
        return BarrierPolicy.ACCUMULATE if self.accumulate_errors else BarrierPolicy.FAIL_FAST

    @classmethod
    def coerce(cls, options: Any) -> "BarrierOptions":
        """Build options from None, a BarrierOptions or a mapping."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            value = options.get("accumulate_errors", options.get("accumulateErrors", False))
            return cls(accumulate_errors=bool(value))
        raise InvalidArgument(f"Barrier options must be a mapping or BarrierOptions, got {type(options).__name__}")


class Barrier:
    """
    Countdown barrier.

    Holds the remaining signal count and fires its callback exactly once.
    Signals received after that are ignored.
    """

    def __init__(self, count: int, callback: Callable[..., Any], policy: BarrierPolicy = BarrierPolicy.FAIL_FAST):
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgument(f"Barrier count must be a positive integer, got {count!r}")
        if not callable(callback):
            raise InvalidArgument("Barrier must be created with a callable callback")

        self._count = count
        self._remaining = count
        self._callback = callback
        self._policy = policy
        self._errors: list[Any] = []
        self._state = BarrierState.WAITING

    @property
    def count(self) -> int:
        return self._count

    @property
    def remaining(self) -> int:
        """Signals still required before the callback fires."""
        return self._remaining

    @property
    def policy(self) -> BarrierPolicy:
        return self._policy

    @property
    def state(self) -> BarrierState:
        return self._state

    @property
    def errors(self) -> list[Any]:
        """Errors collected so far (accumulate policy only)."""
        return list(self._errors)

    def signal(self, error=None) -> None:
        """
        Count one completion.

        Args:
            error: Any truthy value is treated as an error
        """
        if self._state is BarrierState.TERMINAL:
            logger.debug("Signal received after barrier fired, ignoring")
            return

        self._remaining -= 1
        logger.debug(f"Barrier signalled ({self._count - self._remaining}/{self._count}), error={error!r}")

        if self._policy is BarrierPolicy.ACCUMULATE:
            if error:
                self._errors.append(error)
            if self._remaining == 0:
                self._fire(list(self._errors))
            return

        if error or self._remaining == 0:
            self._fire(error)

    __call__ = signal

    def _fire(self, outcome) -> None:
        self._state = BarrierState.TERMINAL
        logger.info(f"Barrier fired after {self._count - self._remaining}/{self._count} signal(s)")
        self._callback(outcome)


def make_barrier(count: int, options=None, callback: Callable[..., Any] | None = None) -> Callable[..., None]:
    """
    Create a countdown barrier and return its signal function.

    The options argument may be omitted: ``make_barrier(3, cb)`` is the same
    as ``make_barrier(3, None, cb)``.

    Args:
        count: Number of signals required
        options: None, BarrierOptions, or a mapping with ``accumulate_errors``
        callback: Fail-fast: ``callback(error)``; accumulate: ``callback(errors)``

    Returns:
        Bound ``signal(error=None)`` method; ``signal.__self__`` is the Barrier

    Raises:
        InvalidArgument: If count is not a positive int, options are malformed
            or callback is not callable
    """
    if callback is None and callable(options):
        callback, options = options, None

    barrier = Barrier(count, callback, BarrierOptions.coerce(options).policy)
    return barrier.signal
