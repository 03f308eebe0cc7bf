# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Peerboard CLI: operational commands.

Commands:
    evaluate   Evaluate a custom formula against one record file.
    export     Build the full comparison for a workspace snapshot and export it.
    catalog    Print the metrics discovered in a snapshot, grouped by category.
    score      Rank the companies and groups of a snapshot.

Exit codes:
    0  Success.
    1  Formula evaluation failed.
    2  Invalid input (unreadable file, malformed snapshot or record, or an
       invalid scoring configuration).

Logging:
    Each command runs inside a command context, so every JSON log line it
    writes carries the command name and a run id.

Environment:
    LOG_LEVEL                      Root log level (default INFO).
    PEERBOARD_NO_DATA_MARKER       Text for missing values (default "N/A").
    PEERBOARD_CURRENCY_SYMBOL      Currency prefix (default "$").
    PEERBOARD_MAX_FORMULA_LENGTH   Formula length limit (default 2000).
    PEERBOARD_EXPORT_SHEET_NAME    XLSX worksheet title (default "Comparison").
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from peerboard.adapters.exporters.comparison_exporters import ExportFormat, export_table
from peerboard.application.schemas.dto.definitions import RecordFieldsDTO, WorkspaceSnapshotDTO
from peerboard.application.services.metric_engine import MetricEngine
from peerboard.application.use_cases.build_comparison_table import (
    BuildComparisonTable,
    TableMetric,
)
from peerboard.application.use_cases.score_comparison import ScoreComparison
from peerboard.config.settings import get_settings
from peerboard.domain.entities.workspace import Workspace
from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.domain.exceptions.base import DomainError
from peerboard.domain.services.formula_evaluator import EvaluationFailure, evaluate
from peerboard.domain.services.metric_grouping import group_metrics
from peerboard.domain.services.metric_registry import (
    MetricDefinition,
    MetricRegistry,
    build_registry,
)
from peerboard.domain.services.scoring_config import (
    ScoringConfiguration,
    default_scoring_config,
)
from peerboard.domain.services.value_formatter import format_value
from peerboard.infrastructure.logging.logger import (
    command_context,
    configure_root_logging,
    get_json_logger,
)

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)

EXIT_EVALUATION_FAILED = 1
EXIT_INVALID_INPUT = 2


def _invalid_input(path: Path, exc: Exception) -> typer.Exit:
    """Log an input problem, report it on stderr, and build the exit signal."""
    log.error(
        "cli.invalid_input",
        extra={"extra": {"path": str(path), "error": type(exc).__name__, "detail": str(exc)}},
    )
    print(f"error: invalid input {path}: {exc}", file=sys.stderr)
    return typer.Exit(code=EXIT_INVALID_INPUT)


def _load_workspace(snapshot: Path) -> Workspace:
    """Read and validate a workspace snapshot file.

    Raises:
        typer.Exit: With code 2 when the file cannot be read or validated.
    """
    try:
        text = snapshot.read_text(encoding="utf-8")
        return WorkspaceSnapshotDTO.model_validate_json(text).to_domain()
    except (OSError, ValidationError, DomainError) as exc:
        raise _invalid_input(snapshot, exc) from exc


def _registry_for(workspace: Workspace) -> MetricRegistry:
    """Core metrics plus metrics discovered from companies that have data."""
    return build_registry(
        c.record for c in workspace.companies if c.has_data and c.record is not None
    )


def _describe(definition: MetricDefinition) -> str:
    return (
        f"{definition.name} ({definition.metric_id}) "
        f"[{definition.format.value}, {definition.aggregation.value}]"
    )


def _workspace_metrics(workspace: Workspace, engine: MetricEngine) -> list[TableMetric]:
    return [*engine.registry, *workspace.custom_metrics]


def _shortlisted(metrics: list[TableMetric], key_metrics: tuple[str, ...]) -> list[TableMetric]:
    """Metrics named in ``key_metrics``, in shortlist order; unknown ids are skipped."""
    by_id = {m.metric_id: m for m in metrics}
    return [by_id[metric_id] for metric_id in key_metrics if metric_id in by_id]


@app.command("evaluate")
def evaluate_formula(
    formula: str = typer.Argument(..., help="Arithmetic formula over record fields."),  # noqa: B008
    record: Path = typer.Option(  # noqa: B008
        ..., "--record", help="JSON object mapping field names to values."
    ),
    fmt: MetricFormat | None = typer.Option(  # noqa: B008
        None, "--format", help="Format the result instead of printing the raw number."
    ),
) -> None:
    """Evaluate ``formula`` against the fields in ``record``.

    Prints the value on success. On failure prints the reason and exits with
    code 1.
    """
    with command_context("evaluate", record=str(record), format=fmt.value if fmt else None):
        settings = get_settings()
        try:
            fields = RecordFieldsDTO.model_validate(
                json.loads(record.read_text(encoding="utf-8"))
            )
        except (OSError, ValueError, ValidationError) as exc:
            raise _invalid_input(record, exc) from exc

        result = evaluate(formula, fields.root, max_length=settings.max_formula_length)
        if isinstance(result, EvaluationFailure):
            log.info(
                "evaluate.failed",
                extra={
                    "extra": {
                        "reason": result.reason.value,
                        "identifiers": list(result.identifiers),
                    }
                },
            )
            print(f"error: {result.reason.value}: {result.message}", file=sys.stderr)
            raise typer.Exit(code=EXIT_EVALUATION_FAILED)

        if fmt is None:
            print(result)
            return
        print(
            format_value(
                result,
                fmt,
                no_data_marker=settings.no_data_marker,
                currency_symbol=settings.currency_symbol,
            )
        )


@app.command("export")
def export_comparison(
    snapshot: Path = typer.Argument(..., help="Workspace snapshot JSON file."),  # noqa: B008
    fmt: ExportFormat = typer.Option(  # noqa: B008
        ExportFormat.CSV, "--format", help="Output format."
    ),
    output: Path | None = typer.Option(  # noqa: B008
        None, "--output", help="Destination file; text formats print to stdout when omitted."
    ),
    key_metrics: bool = typer.Option(  # noqa: B008
        False, "--key-metrics", help="Only export the snapshot's key-metric shortlist."
    ),
) -> None:
    """Export every company and group over core, discovered, and custom metrics."""
    with command_context("export", snapshot=str(snapshot), format=fmt.value):
        settings = get_settings()
        workspace = _load_workspace(snapshot)
        if fmt is ExportFormat.XLSX and output is None:
            print("error: --output is required for xlsx exports", file=sys.stderr)
            raise typer.Exit(code=EXIT_INVALID_INPUT)

        engine = MetricEngine(_registry_for(workspace), settings=settings)
        metrics = _workspace_metrics(workspace, engine)
        if key_metrics:
            metrics = _shortlisted(metrics, workspace.key_metrics)
        table = BuildComparisonTable(engine).execute(
            workspace.companies, workspace.groups, metrics
        )
        text = export_table(table, fmt, output=output, settings=settings)
        if text is not None:
            sys.stdout.write(text if text.endswith("\n") else f"{text}\n")

        log.info(
            "export.done",
            extra={
                "extra": {
                    "format": fmt.value,
                    "output": str(output) if output else None,
                    "rows": len(table.rows),
                    "columns": len(table.columns),
                }
            },
        )


@app.command("catalog")
def catalog(
    snapshot: Path = typer.Argument(..., help="Workspace snapshot JSON file."),  # noqa: B008
) -> None:
    """Print the metric catalogue of ``snapshot`` grouped by category."""
    with command_context("catalog", snapshot=str(snapshot)):
        workspace = _load_workspace(snapshot)
        for group in group_metrics(_registry_for(workspace)):
            print(group.category)
            for definition in group.direct_metrics:
                print(f"  {_describe(definition)}")
            for period, definitions in group.subcategories.items():
                print(f"  {period}")
                for definition in definitions:
                    print(f"    {_describe(definition)}")
        for metric in workspace.custom_metrics:
            print(
                f"Custom: {metric.name} ({metric.metric_id}) "
                f"[{metric.format.value}] = {metric.formula}"
            )


@app.command("score")
def score(
    snapshot: Path = typer.Argument(..., help="Workspace snapshot JSON file."),  # noqa: B008
    by_category: bool = typer.Option(  # noqa: B008
        False,
        "--by-category",
        help="Use the snapshot's scoring configuration, or one derived from priorities.",
    ),
    breakdown: bool = typer.Option(  # noqa: B008
        False, "--breakdown", help="Print each item's category breakdown."
    ),
) -> None:
    """Rank the companies and groups of ``snapshot``.

    Prints one ``rank<TAB>label<TAB>score`` line per item, best first. Scores
    use metric priorities unless ``--by-category`` is given.
    """
    with command_context("score", snapshot=str(snapshot), by_category=by_category):
        workspace = _load_workspace(snapshot)
        engine = MetricEngine(_registry_for(workspace), settings=get_settings())
        metrics = _workspace_metrics(workspace, engine)
        if workspace.key_metrics:
            metrics = _shortlisted(metrics, workspace.key_metrics)

        use_case = ScoreComparison(engine)
        config: ScoringConfiguration | None = None
        if by_category:
            config = workspace.scoring_config
            if config is None:
                _, scoring_metrics = use_case.scoring_inputs(
                    workspace.companies, workspace.groups, metrics
                )
                config = default_scoring_config(scoring_metrics)
        try:
            scores = use_case.execute(
                workspace.companies, workspace.groups, metrics, config=config
            )
        except DomainError as exc:
            raise _invalid_input(snapshot, exc) from exc

        if not scores:
            print("no scores: fewer than two items have data", file=sys.stderr)
            return
        for item in scores:
            print(f"{item.rank}\t{item.item_name}\t{item.total_score:.2f}")
            if breakdown and item.breakdown:
                print(item.breakdown)


if __name__ == "__main__":
    app()
