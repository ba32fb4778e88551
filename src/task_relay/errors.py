"""
Error types shared by the runner and the barrier.

Only InvalidArgument is ever raised by the primitives themselves. TaskError and
SignalError are conveniences for callers: any truthy value handed to a
continuation or a signal is treated as an error.
"""


class InvalidArgument(TypeError):
    """A primitive was constructed with arguments that break its contract."""


class TaskError(Exception):
    """Error a task passes to its continuation."""


class SignalError(Exception):
    """Error passed to a barrier signal."""
