"""
Runners layer - Sequential execution of continuation-passing tasks.

A runner owns an ordered task sequence and hands each task a continuation.
Progress only happens when a task calls that continuation.
"""

from .base import Continuation, FinalCallback, RunnerStatus, Task, validate_tasks
from .sequential import Runner

__all__ = [
    "Continuation",
    "FinalCallback",
    "RunnerStatus",
    "Task",
    "validate_tasks",
    "Runner",
]
