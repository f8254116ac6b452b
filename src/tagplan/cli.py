"""CLI commands for previewing and applying tag placement plans."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer

from .config import DEFAULT_CONFIG_NAME, ConfigError, Settings, load_config
from .errors import (
    AggregateError,
    ErrorPhase,
    ExecutorError,
    InvalidSnapshotError,
    TagError,
    aggregate,
)
from .executors import DryRunExecutor, SlotExecutor, default_context
from .models import ExecutionStatus, OperationPlan, ResolvedTarget, ScreenContext
from .planning.planner import plan as build_plan
from .project import Project, ProjectError, load_project
from .specs import TagValueError, describe_tag_spec, parse_tag_value
from .workflow import WorkflowResult, resolve_tags_for_project

APP_HELP = "Resolve project tag specifications into window-manager slots."

PHASE_HEADERS: Dict[ErrorPhase, str] = {
    ErrorPhase.TAG_RESOLUTION: "TAG RESOLUTION ERRORS:",
    ErrorPhase.EXECUTION: "EXECUTION ERRORS:",
}

app = typer.Typer(help=APP_HELP)


def _load_settings(config: str, *, verbose: bool) -> Settings:
    """Read configuration and configure logging from it."""
    try:
        settings = Settings.from_config(load_config(Path(config)))
    except ConfigError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1) from error
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _load_project(path: Path) -> Project:
    try:
        return load_project(path)
    except ProjectError as error:
        typer.echo(f"Invalid project: {error}")
        raise typer.Exit(code=1) from error


def _build_executor(
    settings: Settings,
    *,
    live: Optional[bool],
    current: Optional[int],
    slots: Optional[int],
) -> SlotExecutor:
    """Select the live executor or a dry-run executor with an optional custom snapshot."""
    if live is None:
        live = settings.executor_mode == "awesome"
    if live:
        if current is not None or slots is not None:
            raise typer.BadParameter(
                "--current and --slots only apply to dry runs.",
                param_hint="--current/--slots",
            )
        return settings.build_executor(live=True)

    slot_count = slots if slots is not None else settings.max_index
    current_index = current if current is not None else 1
    context = default_context(slot_count=slot_count, current_index=current_index)
    return DryRunExecutor(context)


def _describe_target(target: ResolvedTarget) -> str:
    if target.resolved_index is None:
        label = f"slot '{target.name}'"
    elif target.name:
        label = f"slot {target.resolved_index} '{target.name}'"
    else:
        label = f"slot {target.resolved_index}"
    details = [target.kind.value]
    if target.needs_creation:
        details.append("will be created")
    if target.overflow:
        details.append(f"overflow from {target.original_index}")
    return f"{label} ({', '.join(details)})"


def _format_error(error: TagError, *, marker: str = "✗") -> List[str]:
    lines = [f"  {marker} {error.resource_id or 'unknown'}: {error.message}"]
    for suggestion in error.suggestions:
        lines.append(f"    • {suggestion}")
    return lines


def _render_errors(summary: AggregateError) -> None:
    """Print errors grouped by pipeline phase."""
    if not summary.errors:
        return
    for phase, errors in summary.by_phase.items():
        typer.echo(PHASE_HEADERS.get(phase, f"{phase.value.upper()} ERRORS:"))
        for error in errors:
            for line in _format_error(error):
                typer.echo(line)
    typer.echo(summary.message)


def _render_plan(project: Project, context: ScreenContext, operation_plan: OperationPlan) -> None:
    """Render a dry preview of an operation plan."""
    typer.echo(f"Project {project.name}: {len(project.resources)} resource(s)")
    typer.echo(f"Snapshot: current slot {context.current_index} of {context.slot_count}")
    if operation_plan.assignments:
        typer.echo("Assignments:")
        for assignment in operation_plan.assignments:
            typer.echo(f"  - {assignment.resource_name} -> {_describe_target(assignment.target)}")
    else:
        typer.echo("Nothing to execute.")
    if operation_plan.creations:
        typer.echo("Slots to create:")
        for name in operation_plan.creations:
            typer.echo(f"  - {name}")
    if operation_plan.warnings:
        typer.echo("Warnings:")
        for warning in operation_plan.warnings:
            for line in _format_error(warning, marker="!"):
                typer.echo(line)
    if operation_plan.errors:
        _render_errors(aggregate(entry.error for entry in operation_plan.errors))


def _render_workflow(result: WorkflowResult, executor: SlotExecutor) -> None:
    """Render the outcome of executing a plan."""
    execution = result.execution
    if execution.created:
        verb = "Would create" if isinstance(executor, DryRunExecutor) else "Created"
        typer.echo(f"{verb} slots:")
        for created in execution.created:
            typer.echo(f"  + {created.name} (slot {created.slot.index})")
    if result.placements:
        typer.echo("Placements:")
        for placement in result.placements.values():
            label = f"slot {placement.index}"
            if placement.name:
                label = f"{label} '{placement.name}'"
            notes = []
            if placement.overflow:
                notes.append("clamped")
            if placement.fallback:
                notes.append("fallback to current slot")
            suffix = f" [{', '.join(notes)}]" if notes else ""
            typer.echo(f"  - {placement.resource_name} -> {label}{suffix}")
    if result.plan.warnings:
        typer.echo("Warnings:")
        for warning in result.plan.warnings:
            for line in _format_error(warning, marker="!"):
                typer.echo(line)
    _render_errors(result.aggregated_errors())
    if isinstance(executor, DryRunExecutor):
        typer.echo("Dry run: no changes were made.")
    typer.echo(f"Status: {execution.overall_status.value}")


def _report_snapshot_error(error: InvalidSnapshotError) -> None:
    typer.echo(f"Cannot plan: {error.error.message}")
    for suggestion in error.error.suggestions:
        typer.echo(f"  • {suggestion}")


@app.command("plan")
def plan_command(
    project_path: Path = typer.Argument(..., help="Path to the YAML project file."),
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the tagplan configuration file.",
    ),
    live: Optional[bool] = typer.Option(
        None,
        "--live/--dry-run",
        help="Read the snapshot from the running window manager.",
    ),
    current: Optional[int] = typer.Option(None, "--current", help="Current slot for dry runs."),
    slots: Optional[int] = typer.Option(None, "--slots", help="Number of slots for dry runs."),
    max_index: Optional[int] = typer.Option(
        None,
        "--max-index",
        min=1,
        help="Highest addressable slot (defaults to engine.max_index).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Preview how a project's resources would be placed."""
    settings = _load_settings(config, verbose=verbose)
    project = _load_project(project_path)
    executor = _build_executor(settings, live=live, current=current, slots=slots)
    limit = max_index or settings.max_index

    try:
        context = executor.get_screen_context()
        operation_plan = build_plan(project.resources, context, max_index=limit)
    except InvalidSnapshotError as error:
        _report_snapshot_error(error)
        raise typer.Exit(code=1) from error
    except ExecutorError as error:
        typer.echo(f"Failed to read screen state: {error}")
        raise typer.Exit(code=1) from error

    _render_plan(project, context, operation_plan)


@app.command()
def apply(
    project_path: Path = typer.Argument(..., help="Path to the YAML project file."),
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the tagplan configuration file.",
    ),
    live: Optional[bool] = typer.Option(
        None,
        "--live/--dry-run",
        help="Create slots in the running window manager instead of simulating.",
    ),
    current: Optional[int] = typer.Option(None, "--current", help="Current slot for dry runs."),
    slots: Optional[int] = typer.Option(None, "--slots", help="Number of slots for dry runs."),
    max_index: Optional[int] = typer.Option(
        None,
        "--max-index",
        min=1,
        help="Highest addressable slot (defaults to engine.max_index).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Plan and execute slot creation for a project's resources."""
    settings = _load_settings(config, verbose=verbose)
    project = _load_project(project_path)
    executor = _build_executor(settings, live=live, current=current, slots=slots)
    limit = max_index or settings.max_index

    try:
        result = resolve_tags_for_project(project.resources, executor, max_index=limit)
    except InvalidSnapshotError as error:
        _report_snapshot_error(error)
        raise typer.Exit(code=1) from error
    except ExecutorError as error:
        typer.echo(f"Failed to read screen state: {error}")
        raise typer.Exit(code=1) from error

    typer.echo(f"Project {project.name} via {executor.label}")
    _render_workflow(result, executor)
    if result.execution.overall_status == ExecutionStatus.FAILURE:
        raise typer.Exit(code=1)


@app.command()
def describe(value: str = typer.Argument(..., help="Tag value as written in a project file.")) -> None:
    """Explain how a tag value will be interpreted."""
    try:
        spec = parse_tag_value(value)
    except TagValueError as error:
        raise typer.BadParameter(str(error), param_hint="VALUE") from error
    typer.echo(describe_tag_spec(spec))


if __name__ == "__main__":
    app()
