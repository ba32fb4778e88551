"""
Built-in steps - Task callables referenced from pipeline files.

Every step takes the continuation as its first argument; pipeline params are
bound as keyword arguments.
"""

import logging
import subprocess
from pathlib import Path

from .errors import TaskError
from .runners.base import Continuation

logger = logging.getLogger(__name__)


def noop(done: Continuation) -> None:
    """Continue immediately."""
    done()


def echo(done: Continuation, message: str = "") -> None:
    """Log a message and continue."""
    logger.info(message)
    done()


def fail(done: Continuation, message: str = "step failed") -> None:
    """Continue with a TaskError."""
    done(TaskError(message))


def shell(done: Continuation, command: str, cwd: str | None = None) -> None:
    """
    Run a shell command and continue with its outcome.

    Args:
        done: Continuation
        command: Command line passed to the shell
        cwd: Optional working directory

    A non-zero exit status continues with a TaskError carrying the last
    line of stderr.
    """
    logger.info(f"$ {command}")
    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=Path(cwd) if cwd else None,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        done(TaskError(f"Could not run {command!r}: {e}"))
        return

    if result.returncode != 0:
        stderr = result.stderr.strip().splitlines()
        detail = stderr[-1] if stderr else "no output"
        done(TaskError(f"Command {command!r} exited with {result.returncode}: {detail}"))
        return

    if result.stdout:
        logger.debug(result.stdout.rstrip())
    done()
