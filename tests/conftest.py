"""Shared pytest fixtures for task-relay tests."""

import logging

import pytest
from typer.testing import CliRunner


class CallRecorder:
    """Callable that records every call's positional arguments."""

    def __init__(self):
        self.calls: list[tuple] = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def recorder():
    """Records calls made to a final callback."""
    return CallRecorder()


@pytest.fixture
def pipeline_file(tmp_path):
    """Write a pipeline YAML file and return its path."""

    def _write(content: str, name: str = "pipeline.yaml"):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging() changes made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
