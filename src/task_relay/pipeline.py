"""
Pipeline definitions - YAML step lists resolved into Runner tasks.

Pipelines are DATA: they name the callables to run and their parameters.
Execution is the Runner's job.
"""

import functools
import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidArgument
from .runners import FinalCallback, Runner, Task

logger = logging.getLogger(__name__)


def resolve_call(reference: str) -> Task:
    """
    Import a callable from a ``module:attribute`` reference.

    Args:
        reference: e.g. ``task_relay.steps:shell``

    Returns:
        The referenced callable

    Raises:
        InvalidArgument: If the reference is malformed, cannot be imported,
            or does not name a callable
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise InvalidArgument(f"Step call must look like 'module:function', got {reference!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidArgument(f"Cannot import module {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise InvalidArgument(f"{module_name!r} has no attribute {attr_path!r}") from e

    if not callable(target):
        raise InvalidArgument(f"{reference!r} is not callable")
    return target


@dataclass
class PipelineStep:
    """A single step: a callable reference plus keyword params."""

    id: str
    call: str
    description: str = ""
    params: dict[str, Any] = field(default_factory=dict)

    def build_task(self) -> Task:
        """Resolve the call and bind params."""
        func = resolve_call(self.call)
        if not self.params:
            return func
        return functools.partial(func, **self.params)


@dataclass
class Pipeline:
    """An ordered list of steps."""

    name: str
    description: str = ""
    steps: list[PipelineStep] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, default_name: str = "pipeline") -> "Pipeline":
        """
        Create a pipeline from parsed YAML.

        Raises:
            InvalidArgument: On a missing step list, incomplete steps or
                duplicate step ids
        """
        if not isinstance(data, dict):
            raise InvalidArgument("Pipeline definition must be a mapping")

        raw_steps = data.get("steps")
        if not isinstance(raw_steps, list):
            raise InvalidArgument("Pipeline definition must contain a 'steps' list")

        steps = []
        seen: set[str] = set()
        for position, raw in enumerate(raw_steps, start=1):
            if not isinstance(raw, dict) or "id" not in raw or "call" not in raw:
                raise InvalidArgument(f"Step {position} must be a mapping with 'id' and 'call'")

            step_id = str(raw["id"])
            if step_id in seen:
                raise InvalidArgument(f"Duplicate step id: {step_id}")
            seen.add(step_id)

            params = raw.get("params") or {}
            if not isinstance(params, dict):
                raise InvalidArgument(f"Step {step_id}: 'params' must be a mapping")

            steps.append(
                PipelineStep(
                    id=step_id,
                    call=str(raw["call"]),
                    description=str(raw.get("description", "")),
                    params=params,
                )
            )

        return cls(
            name=str(data.get("name", default_name)),
            description=str(data.get("description", "")),
            steps=steps,
        )

    def get_step(self, step_id: str) -> PipelineStep | None:
        """Get a step by ID."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def build_tasks(self) -> list[Task]:
        """Resolve every step into a task callable, in order."""
        return [step.build_task() for step in self.steps]


def load_pipeline(path: Path) -> Pipeline:
    """
    Load a pipeline from a YAML file.

    Raises:
        InvalidArgument: If the file is missing, is not valid YAML, or
            does not describe a pipeline
    """
    if not path.exists():
        raise InvalidArgument(f"Pipeline file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidArgument(f"Invalid YAML in {path}: {e}") from e

    return Pipeline.from_dict(data, default_name=path.stem)


def find_pipeline(name: Path, search_paths: list[Path]) -> Path:
    """Resolve a relative pipeline path against search directories."""
    if name.is_absolute() or name.exists():
        return name
    for directory in search_paths:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return name


def run_pipeline(pipeline: Pipeline, callback: FinalCallback) -> Runner:
    """
    Build a Runner for the pipeline's steps and start it.

    Args:
        pipeline: Pipeline to execute
        callback: Final callback, see Runner

    Returns:
        The started Runner
    """
    runner = Runner(pipeline.build_tasks(), callback)
    logger.info(f"Running pipeline {pipeline.name!r} ({len(pipeline.steps)} steps)")
    runner.start()
    return runner
