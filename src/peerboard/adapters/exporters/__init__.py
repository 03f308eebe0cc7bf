# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Serializers for comparison tables."""

from peerboard.adapters.exporters.comparison_exporters import (
    ExportFormat,
    export_table,
    to_csv,
    to_json,
    to_xlsx,
)

__all__ = ["ExportFormat", "export_table", "to_csv", "to_json", "to_xlsx"]
