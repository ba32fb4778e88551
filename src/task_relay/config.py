"""
Configuration management with YAML loading and environment variable support.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .barrier import BarrierOptions


def _env_paths(env_var: str) -> list[Path]:
    """Get a list of paths from an os.pathsep separated environment variable."""
    if value := os.environ.get(env_var):
        return [Path(p) for p in value.split(os.pathsep) if p]
    return []


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.environ.get("TRELAY_LOG_LEVEL", "WARNING"))
    rich_tracebacks: bool = True


@dataclass
class BarrierConfig:
    accumulate_errors: bool = False

    def to_options(self) -> BarrierOptions:
        return BarrierOptions(accumulate_errors=self.accumulate_errors)


@dataclass
class PipelineConfig:
    """Where relative pipeline paths are looked up."""

    search_paths: list[Path] = field(default_factory=lambda: _env_paths("TRELAY_PIPELINE_PATH"))


@dataclass
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    barrier: BarrierConfig = field(default_factory=BarrierConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary."""
        config = cls()

        if "logging" in data:
            for key, value in (data["logging"] or {}).items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, value)

        if "barrier" in data:
            for key, value in (data["barrier"] or {}).items():
                if hasattr(config.barrier, key):
                    setattr(config.barrier, key, value)

        if "pipeline" in data:
            paths = (data["pipeline"] or {}).get("search_paths")
            if isinstance(paths, (str, Path)):
                paths = [paths]
            if paths:
                config.pipeline.search_paths = [Path(p) for p in paths]

        return config


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "task-relay"
    return Path.home() / ".config" / "task-relay"


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load configuration, searching standard locations when no path is given.

    Args:
        config_path: Explicit config file

    Returns:
        AppConfig (defaults if no file is found)
    """
    if config_path is None:
        search_paths = [
            _get_default_config_dir() / "config.yaml",
            Path.cwd() / "trelay.yaml",
        ]
        if env_path := os.environ.get("TRELAY_CONFIG"):
            search_paths.insert(0, Path(env_path))
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return AppConfig.from_yaml(config_path) if config_path else AppConfig()
