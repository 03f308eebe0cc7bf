# src/peerboard/adapters/exporters/comparison_exporters.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Comparison Table Exporters

Purpose:
    Serialize a :class:`ComparisonTable` as CSV, JSON, or an XLSX workbook.
    Every format keeps the same shape: a ``Metric`` column followed by one
    column per compared entity, one row per metric.

Layer: adapters/exporters

Notes:
    - Cells are already formatted strings; exporters never reformat values.
    - An empty table exports its header only (``[]`` for JSON).
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font

from peerboard.application.use_cases.build_comparison_table import ComparisonTable
from peerboard.config.settings import Settings
from peerboard.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

DEFAULT_SHEET_NAME = "Comparison"


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"


def to_csv(table: ComparisonTable) -> str:
    """Render ``table`` as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(table.columns)
    for row in table.rows:
        writer.writerow((row.label, *row.cells))
    return buffer.getvalue()


def to_json(table: ComparisonTable) -> str:
    """Render ``table`` as a JSON array of row objects keyed by column."""
    return json.dumps(table.as_dicts(), indent=2, ensure_ascii=False)


def to_xlsx(table: ComparisonTable, path: Path | str, *, settings: Settings | None = None) -> Path:
    """Write ``table`` to a single-sheet workbook at ``path``.

    Args:
        table: Formatted comparison table.
        path: Destination file; parent directories must exist.
        settings: Optional settings supplying the worksheet title.

    Returns:
        Path: The written file.
    """
    target = Path(path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = settings.export_sheet_name if settings else DEFAULT_SHEET_NAME

    sheet.append(list(table.columns))
    bold = Font(bold=True)
    for cell in sheet[1]:
        cell.font = bold
    for row in table.rows:
        sheet.append([row.label, *row.cells])

    workbook.save(target)
    logger.info(
        "Comparison exported",
        extra={
            "extra": {
                "format": ExportFormat.XLSX.value,
                "path": str(target),
                "rows": len(table.rows),
            }
        },
    )
    return target


def export_table(
    table: ComparisonTable,
    fmt: ExportFormat,
    *,
    output: Path | None = None,
    settings: Settings | None = None,
) -> str | None:
    """Export ``table`` in ``fmt``.

    Text formats are returned when ``output`` is ``None`` and written to
    ``output`` otherwise. XLSX always requires ``output``.

    Returns:
        The rendered text for text formats without ``output``, else ``None``.

    Raises:
        ValueError: If XLSX is requested without an output path.
    """
    if fmt is ExportFormat.XLSX:
        if output is None:
            raise ValueError("xlsx export requires an output path")
        to_xlsx(table, output, settings=settings)
        return None

    text = to_csv(table) if fmt is ExportFormat.CSV else to_json(table)
    if output is None:
        return text
    output.write_text(text, encoding="utf-8")
    logger.info(
        "Comparison exported",
        extra={"extra": {"format": fmt.value, "path": str(output), "rows": len(table.rows)}},
    )
    return None


__all__ = ["DEFAULT_SHEET_NAME", "ExportFormat", "export_table", "to_csv", "to_json", "to_xlsx"]
