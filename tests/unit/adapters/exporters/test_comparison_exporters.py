# tests/unit/adapters/exporters/test_comparison_exporters.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

import pytest
from openpyxl import load_workbook

from peerboard.adapters.exporters.comparison_exporters import (
    ExportFormat,
    export_table,
    to_csv,
    to_json,
    to_xlsx,
)
from peerboard.application.use_cases.build_comparison_table import (
    ComparisonRow,
    ComparisonTable,
)
from peerboard.config.settings import Settings

TABLE = ComparisonTable(
    columns=("Metric", "AAPL", "Big Tech"),
    rows=(
        ComparisonRow(metric_id="marketCap", label="Market Cap", cells=("$3.00T", "$5.10T")),
        ComparisonRow(metric_id="sector", label="Sector", cells=("Tech, Hardware", "N/A")),
    ),
)
EMPTY = ComparisonTable(columns=("Metric", "AAPL"), rows=())


def test_csv_has_header_and_quotes_only_when_needed() -> None:
    text = to_csv(TABLE)

    assert text.splitlines()[0] == "Metric,AAPL,Big Tech"
    assert '"Tech, Hardware"' in text
    assert list(csv.reader(io.StringIO(text))) == [
        ["Metric", "AAPL", "Big Tech"],
        ["Market Cap", "$3.00T", "$5.10T"],
        ["Sector", "Tech, Hardware", "N/A"],
    ]


def test_json_is_list_of_row_objects() -> None:
    payload = json.loads(to_json(TABLE))

    assert payload == [
        {"Metric": "Market Cap", "AAPL": "$3.00T", "Big Tech": "$5.10T"},
        {"Metric": "Sector", "AAPL": "Tech, Hardware", "Big Tech": "N/A"},
    ]
    assert to_json(TABLE).startswith("[\n  {")


def test_empty_table_exports_header_only(tmp_path: Path) -> None:
    assert to_csv(EMPTY) == "Metric,AAPL\n"
    assert json.loads(to_json(EMPTY)) == []

    path = to_xlsx(EMPTY, tmp_path / "empty.xlsx")
    sheet = load_workbook(path).active
    assert [[c.value for c in row] for row in sheet.iter_rows()] == [["Metric", "AAPL"]]


def test_xlsx_round_trip_with_bold_header(tmp_path: Path) -> None:
    path = to_xlsx(
        TABLE, tmp_path / "comparison.xlsx", settings=Settings(export_sheet_name="Peers")
    )

    workbook = load_workbook(path)
    assert workbook.sheetnames == ["Peers"]
    sheet = workbook["Peers"]
    assert [[c.value for c in row] for row in sheet.iter_rows()] == [
        ["Metric", "AAPL", "Big Tech"],
        ["Market Cap", "$3.00T", "$5.10T"],
        ["Sector", "Tech, Hardware", "N/A"],
    ]
    assert all(cell.font.bold for cell in sheet[1])
    assert not sheet["A2"].font.bold


def test_export_table_writes_text_formats(tmp_path: Path) -> None:
    assert export_table(TABLE, ExportFormat.CSV) == to_csv(TABLE)

    target = tmp_path / "out.json"
    assert export_table(TABLE, ExportFormat.JSON, output=target) is None
    assert json.loads(target.read_text(encoding="utf-8"))[0]["Metric"] == "Market Cap"


def test_export_table_requires_path_for_xlsx() -> None:
    with pytest.raises(ValueError):
        export_table(TABLE, ExportFormat.XLSX)
