"""CLI tool for validating, previewing and applying change plans."""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from jsonschema import Draft202012Validator
from pydantic import ValidationError
from typing_extensions import Annotated

from archiplan.catalog.compatibility import MatrixCompatibilityOracle
from archiplan.catalog.operations import build_output_schema, normalize_actions
from archiplan.execution.config import ExecutorConfig
from archiplan.execution.executor import PlanExecutor
from archiplan.models.enums import ExecutionMode
from archiplan.models.execution_result import PlanExecutionResult
from archiplan.models.snapshot import ModelSnapshot
from archiplan.observability.logging import setup_logging
from archiplan.persistence.in_memory import InMemoryModelStore
from archiplan.planning.context import build_planning_context
from archiplan.utils import dump_structured_file, load_structured_file
from archiplan.validation.validator import PlanValidator

app = typer.Typer(help="ArchiMate change plan CLI")

ModelOption = Annotated[
    Optional[Path],
    typer.Option(
        "--model",
        help="Model snapshot (JSON or YAML). Defaults to ARCHIPLAN_MODEL_PATH.",
    ),
]


@app.callback()
def main(
    log_level: Annotated[
        Optional[str], typer.Option(help="Log level. Defaults to LOG_LEVEL or INFO.")
    ] = None,
):
    """Validates, previews and applies ArchiMate change plans."""
    # stdout carries command output, logs go to stderr
    if log_level or os.environ.get("LOG_LEVEL"):
        setup_logging(level=log_level, stream=sys.stderr)


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def resolve_model_path(model_path: Optional[Path]) -> Optional[Path]:
    if model_path is not None:
        return model_path
    env_path = os.environ.get("ARCHIPLAN_MODEL_PATH")
    return Path(env_path) if env_path else None


def load_model(model_path: Optional[Path]) -> InMemoryModelStore:
    """Loads a model snapshot, or returns an empty model if no path is set."""
    path = resolve_model_path(model_path)
    if path is None:
        return InMemoryModelStore()
    if not path.exists():
        _fail(f"Model file not found: {path}")
    try:
        snapshot = ModelSnapshot.model_validate(load_structured_file(path))
    except (ValueError, yaml.YAMLError) as e:
        _fail(f"Could not load model {path}: {str(e)}")
    return InMemoryModelStore.from_snapshot(snapshot)


def load_plan(plan_path: Path) -> dict:
    if not plan_path.exists():
        _fail(f"Plan file not found: {plan_path}")
    try:
        plan = load_structured_file(plan_path)
    except (ValueError, yaml.YAMLError) as e:
        _fail(f"Could not parse plan {plan_path}: {str(e)}")
    return normalize_actions(plan)


def _validate_or_exit(plan, store, oracle, scope=None):
    result = PlanValidator(store, oracle).validate(plan, scope=scope)
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}")
    if not result.ok:
        for error in result.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)
    return result


def _echo_outcomes(result: PlanExecutionResult):
    for outcome in result.results:
        if outcome.skipped:
            typer.echo(f"[SKIP] {outcome.index + 1}. {outcome.op}")
        elif not outcome.ok:
            typer.echo(f"[FAIL] {outcome.index + 1}. {outcome.op}: {outcome.error}")
        elif outcome.preview is not None:
            typer.echo(f"{outcome.index + 1}. {outcome.preview}")
        else:
            typer.echo(f"[OK] {outcome.index + 1}. {outcome.op}")


@app.command("schema")
def schema_command(
    output: Annotated[
        Optional[Path], typer.Option(help="Write the schema to this file.")
    ] = None,
):
    """Prints the structured output schema for plan producers."""
    schema = build_output_schema()
    Draft202012Validator.check_schema(schema)
    text = json.dumps(schema, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"Schema written to {output}")


@app.command("validate")
def validate_command(
    plan_path: Annotated[Path, typer.Argument(help="Plan file (JSON or YAML).")],
    model: ModelOption = None,
    scope: Annotated[
        Optional[list[str]],
        typer.Option("--scope", help="Restrict targets to these element IDs."),
    ] = None,
):
    """Validates a plan against a model."""
    store = load_model(model)
    plan = load_plan(plan_path)
    _validate_or_exit(
        plan, store, MatrixCompatibilityOracle(), set(scope) if scope else None
    )
    typer.echo("Plan is valid.")


@app.command("preview")
def preview_command(
    plan_path: Annotated[Path, typer.Argument(help="Plan file (JSON or YAML).")],
    model: ModelOption = None,
):
    """Validates a plan and prints what applying it would do."""
    store = load_model(model)
    oracle = MatrixCompatibilityOracle()
    plan = load_plan(plan_path)
    _validate_or_exit(plan, store, oracle)

    result = PlanExecutor(store, oracle).execute(plan, mode=ExecutionMode.PREVIEW)
    if result.message:
        typer.echo(result.message)
    _echo_outcomes(result)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command("apply")
def apply_command(
    plan_path: Annotated[Path, typer.Argument(help="Plan file (JSON or YAML).")],
    model: ModelOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option(help="Where to write the updated model. Defaults to --model."),
    ] = None,
    continue_on_error: Annotated[
        bool, typer.Option(help="Keep applying actions after a failure.")
    ] = False,
):
    """Validates and applies a plan, then writes the updated model."""
    store = load_model(model)
    oracle = MatrixCompatibilityOracle()
    plan = load_plan(plan_path)
    _validate_or_exit(plan, store, oracle)

    try:
        config = ExecutorConfig.from_env()
    except (ValueError, ValidationError) as e:
        _fail(str(e))
    result = PlanExecutor(store, oracle, config).execute(
        plan,
        mode=ExecutionMode.APPLY,
        stop_on_error=False if continue_on_error else None,
    )

    if result.message:
        typer.echo(result.message)
    _echo_outcomes(result)
    typer.echo(
        f"Applied: {result.applied}, failed: {result.failed}, "
        f"skipped: {result.skipped}, auto-connected: {result.auto_connected}"
    )
    if result.auto_connect_error:
        typer.echo(f"Warning: auto-connect failed: {result.auto_connect_error}")

    target = output or resolve_model_path(model)
    if target is not None and result.applied:
        dump_structured_file(target, store.to_snapshot().model_dump(mode="json"))
        typer.echo(f"Model written to {target}")

    if not result.ok:
        raise typer.Exit(code=1)


@app.command("context")
def context_command(
    model: ModelOption = None,
    element: Annotated[
        Optional[list[str]],
        typer.Option("--element", help="Restrict the context to these element IDs."),
    ] = None,
    documentation: Annotated[
        bool, typer.Option(help="Include element documentation.")
    ] = False,
    properties: Annotated[bool, typer.Option(help="Include element properties.")] = False,
    max_elements: Annotated[int, typer.Option(help="Maximum elements listed.")] = 200,
):
    """Prints the planning context for a model as JSON."""
    store = load_model(model)
    context = build_planning_context(
        store,
        element_ids=element or None,
        include_documentation=documentation,
        include_properties=properties,
        max_elements=max_elements,
    )
    typer.echo(json.dumps(context.to_json_dict(), indent=2))


if __name__ == "__main__":
    app()
