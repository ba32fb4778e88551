"""
CLI module - Command line interface for Task Relay

Entry point for the `trelay` command using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .barrier import BarrierOptions, BarrierState, make_barrier
from .config import AppConfig, load_config
from .errors import InvalidArgument
from .log import setup_logging
from .pipeline import Pipeline, find_pipeline, load_pipeline, run_pipeline

console = Console()
app = typer.Typer(
    name="trelay",
    help="Task Relay - run continuation-passing task pipelines.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"trelay version {__version__}")
        raise typer.Exit()


ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """Task Relay - run continuation-passing task pipelines."""
    pass


def _load_pipelines(paths: list[Path], config: AppConfig) -> list[Pipeline]:
    pipelines = []
    for path in paths:
        resolved = find_pipeline(path, config.pipeline.search_paths)
        try:
            pipelines.append(load_pipeline(resolved))
        except InvalidArgument as e:
            console.print(f"[red]Invalid pipeline {path}: {e}[/red]")
            raise typer.Exit(1) from None
    return pipelines


@app.command()
def run(
    pipelines: Annotated[list[Path], typer.Argument(help="Pipeline YAML file(s) to run in order")],
    keep_going: Annotated[
        bool, typer.Option("--keep-going", "-k", help="Run every pipeline and report all failures")
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log every dispatched task")] = False,
    config: ConfigOption = None,
):
    """
    Run one or more pipelines.

    Each pipeline gets its own runner. A barrier collects their outcomes:
    by default the first failing pipeline stops the rest.

    [bold]Examples:[/bold]

        trelay run build.yaml

        trelay run lint.yaml test.yaml --keep-going
    """
    app_config = load_config(config)
    setup_logging("DEBUG" if verbose else app_config.logging.level, app_config.logging.rich_tracebacks)

    loaded = _load_pipelines(pipelines, app_config)

    options = app_config.barrier.to_options()
    if keep_going:
        options = BarrierOptions(accumulate_errors=True)

    outcome: dict[str, object] = {}

    def on_all_done(result):
        outcome["fired"] = True
        outcome["result"] = result

    signal = make_barrier(len(loaded), options, on_all_done)

    for pipeline in loaded:
        if signal.__self__.state is BarrierState.TERMINAL:
            console.print(f"[dim]Skipping {pipeline.name}[/dim]")
            continue

        def on_pipeline_done(error=None, name=pipeline.name):
            if error:
                console.print(f"[red]✗ {name}: {error}[/red]")
            else:
                console.print(f"[green]✓ {name}[/green]")
            signal(error)

        try:
            run_pipeline(pipeline, on_pipeline_done)
        except InvalidArgument as e:
            console.print(f"[red]Invalid pipeline {pipeline.name}: {e}[/red]")
            raise typer.Exit(1) from None

    if not outcome.get("fired"):
        console.print("[yellow]Pipelines did not finish (a task never continued)[/yellow]")
        raise typer.Exit(1)

    result = outcome["result"]
    failed = bool(result)
    if failed and options.accumulate_errors:
        console.print(f"[red]{len(result)} pipeline(s) failed[/red]")
    if failed:
        raise typer.Exit(1)


@app.command()
def check(
    pipeline: Annotated[Path, typer.Argument(help="Pipeline YAML file to validate")],
    config: ConfigOption = None,
):
    """Validate a pipeline file and list its steps."""
    app_config = load_config(config)
    [loaded] = _load_pipelines([pipeline], app_config)

    try:
        loaded.build_tasks()
    except InvalidArgument as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1) from None

    table = Table(title=f"Pipeline: {loaded.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Call")
    table.add_column("Description", style="dim")

    for position, step in enumerate(loaded.steps, start=1):
        table.add_row(str(position), step.id, step.call, step.description)

    console.print(table)
    console.print(f"[green]✓ {len(loaded.steps)} step(s) OK[/green]")


if __name__ == "__main__":
    app()
