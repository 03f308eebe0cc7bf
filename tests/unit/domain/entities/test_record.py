# tests/unit/domain/entities/test_record.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT

from __future__ import annotations

import pytest

from peerboard.domain.entities.record import Record, as_float, is_number
from peerboard.domain.exceptions.entities import InvalidRecordError


def test_record_preserves_insertion_order_and_drops_none() -> None:
    record = Record({"ticker": "AAPL", "name": "Apple", "marketCap": 3e12, "beta": None, "pe": 30})

    assert list(record) == ["ticker", "name", "marketCap", "pe"]
    assert "beta" not in record
    assert record.ticker == "AAPL"
    assert record.name == "Apple"


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "Apple"},
        {"ticker": "", "name": "Apple"},
        {"ticker": "AAPL", "name": "   "},
        {"ticker": 1, "name": "Apple"},
    ],
)
def test_record_requires_identity_strings(fields: dict) -> None:
    with pytest.raises(InvalidRecordError) as exc_info:
        Record(fields)
    assert exc_info.value.code == "INVALID_RECORD"


def test_record_rejects_booleans_and_other_types() -> None:
    with pytest.raises(InvalidRecordError):
        Record({"ticker": "AAPL", "name": "Apple", "profitable": True})
    with pytest.raises(InvalidRecordError):
        Record({"ticker": "AAPL", "name": "Apple", "tags": ["tech"]})


def test_number_and_numeric_fields_skip_text() -> None:
    record = Record({"ticker": "AAPL", "name": "Apple", "sector": "Tech", "pe": 30, "eps": 6.5})

    assert record.number("pe") == 30.0
    assert isinstance(record.number("pe"), float)
    assert record.number("sector") is None
    assert record.number("missing") is None
    assert record.numeric_fields() == {"pe": 30.0, "eps": 6.5}


def test_with_fields_returns_new_record_and_removes_none() -> None:
    record = Record({"ticker": "AAPL", "name": "Apple", "pe": 30})

    updated = record.with_fields({"pe": None, "eps": 6.5})

    assert updated.to_dict() == {"ticker": "AAPL", "name": "Apple", "eps": 6.5}
    assert record.to_dict() == {"ticker": "AAPL", "name": "Apple", "pe": 30}


def test_is_number_excludes_bool() -> None:
    assert is_number(1)
    assert is_number(1.5)
    assert not is_number(True)
    assert not is_number("1")
    assert not is_number(None)


def test_integer_beyond_float_range_reads_as_non_numeric() -> None:
    record = Record({"ticker": "AAPL", "name": "Apple", "shares": 10**400, "pe": 30})

    assert record["shares"] == 10**400
    assert record.number("shares") is None
    assert record.numeric_fields() == {"pe": 30.0}
    assert as_float(10**400) is None
    assert as_float(True) is None
    assert as_float(7) == 7.0
