# src/peerboard/domain/services/value_formatter.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Display formatting for metric values.

Purpose:
    Turn a raw metric result plus a format tag into the string shown in
    tables and written to exports.

Layer:
    domain

Notes:
    - Missing, NaN and infinite values all render as the no-data marker.
    - Strings pass through untouched regardless of the tag.
    - Formatting never raises; failures collapse to the no-data marker.
"""

from __future__ import annotations

import math

from peerboard.domain.entities.record import is_number
from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.types import FieldValue

DEFAULT_NO_DATA_MARKER = "N/A"
DEFAULT_CURRENCY_SYMBOL = "$"

# Magnitude bands for abbreviated currency, largest first.
_CURRENCY_BANDS: tuple[tuple[float, str], ...] = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
)
_MAX_NUMBER_FRACTION_DIGITS = 3


def _format_currency(value: float, symbol: str) -> str:
    for threshold, suffix in _CURRENCY_BANDS:
        if abs(value) >= threshold:
            return f"{symbol}{value / threshold:.2f}{suffix}"
    return f"{symbol}{value:.2f}"


def _format_grouped(value: float | int) -> str:
    """Render with thousands separators and at most three fraction digits."""
    if isinstance(value, int):
        return f"{value:,}"
    rendered = f"{value:,.{_MAX_NUMBER_FRACTION_DIGITS}f}"
    if "." in rendered:
        rendered = rendered.rstrip("0").rstrip(".")
    return "0" if rendered == "-0" else rendered


def _format_plain(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_value(
    value: FieldValue,
    fmt: MetricFormat | str,
    *,
    no_data_marker: str = DEFAULT_NO_DATA_MARKER,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> str:
    """Format a metric value for display.

    Args:
        value:
            Raw metric value (number, string, or ``None``).
        fmt:
            Output format tag. Unknown tags fall back to a plain rendering.
        no_data_marker:
            Text used for missing or non-finite values.
        currency_symbol:
            Prefix used by the ``currency`` format.

    Returns:
        Display string; never raises.
    """
    if value is None:
        return no_data_marker
    if isinstance(value, str):
        return value

    try:
        if not is_number(value) or not math.isfinite(value):
            return no_data_marker

        try:
            tag = MetricFormat(fmt)
        except ValueError:
            return _format_plain(value)

        if tag is MetricFormat.CURRENCY:
            return _format_currency(value, currency_symbol)
        if tag is MetricFormat.PERCENTAGE:
            return f"{value:.2f}%"
        if tag is MetricFormat.RATIO:
            return f"{value:.2f}"
        if tag is MetricFormat.NUMBER:
            return _format_grouped(value)
        return _format_plain(value)
    except (ValueError, TypeError, OverflowError):
        return no_data_marker


__all__ = ["DEFAULT_CURRENCY_SYMBOL", "DEFAULT_NO_DATA_MARKER", "format_value"]
