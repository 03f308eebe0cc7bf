# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Record Entity

Purpose:
    Immutable, insertion-ordered mapping of field name to value describing one
    company or one synthetic group at a point in time. The schema is open:
    any number of extra fields may accompany the identity fields.

Layer: domain/entities

Notes:
    - ``ticker`` and ``name`` are always present as non-empty strings.
    - A field set to ``None`` is normalized away; absence and zero differ.
    - Booleans are not numbers here even though ``bool`` subclasses ``int``.
    - Integers beyond float range are kept as given but read as non-numeric.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from peerboard.domain.exceptions.entities import InvalidRecordError
from peerboard.types import FieldValue

TICKER_FIELD = "ticker"
NAME_FIELD = "name"
INDUSTRY_FIELD = "industry"
IDENTITY_FIELDS: frozenset[str] = frozenset({TICKER_FIELD, NAME_FIELD, INDUSTRY_FIELD})


def is_number(value: Any) -> bool:
    """Return True when ``value`` is an int or float (booleans excluded)."""
    return isinstance(value, int | float) and not isinstance(value, bool)


def as_float(value: Any) -> float | None:
    """Return ``value`` as a float, or ``None`` when it is not usable as one.

    Integers too large for a float are treated as non-numeric rather than
    raising ``OverflowError``.
    """
    if not is_number(value):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


class Record(Mapping[str, FieldValue]):
    """Open-schema financial record.

    Args:
        fields: Mapping of field name to value. Values must be ``int``,
            ``float``, ``str`` or ``None``.

    Raises:
        InvalidRecordError: If identity fields are missing or a value has an
            unsupported type.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, FieldValue]) -> None:
        normalized: dict[str, FieldValue] = {}
        for key, value in fields.items():
            if not isinstance(key, str) or not key:
                raise InvalidRecordError(
                    "record field names must be non-empty strings",
                    details={"field": repr(key)},
                )
            if value is None:
                continue
            if not (is_number(value) or isinstance(value, str)):
                raise InvalidRecordError(
                    f"unsupported value type for field '{key}'",
                    details={"field": key, "type": type(value).__name__},
                )
            normalized[key] = value

        for identity in (TICKER_FIELD, NAME_FIELD):
            value = normalized.get(identity)
            if not isinstance(value, str) or not value.strip():
                raise InvalidRecordError(
                    f"record requires a non-empty string '{identity}'",
                    details={"field": identity},
                )

        self._fields = normalized

    # ------------------------------------------------------------------ #
    # Mapping protocol                                                   #
    # ------------------------------------------------------------------ #

    def __getitem__(self, key: str) -> FieldValue:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"

    # ------------------------------------------------------------------ #
    # Accessors                                                          #
    # ------------------------------------------------------------------ #

    @property
    def ticker(self) -> str:
        return str(self._fields[TICKER_FIELD])

    @property
    def name(self) -> str:
        return str(self._fields[NAME_FIELD])

    def number(self, field: str) -> float | None:
        """Return a field as ``float`` if it holds a number, else ``None``."""
        return as_float(self._fields.get(field))

    def numeric_fields(self) -> dict[str, float]:
        """Return every numeric field in insertion order, as floats."""
        return {
            key: number
            for key, value in self._fields.items()
            if (number := as_float(value)) is not None
        }

    def with_fields(self, updates: Mapping[str, FieldValue]) -> Record:
        """Return a new record with ``updates`` applied (``None`` removes)."""
        merged = dict(self._fields)
        merged.update(updates)
        return Record(merged)

    def to_dict(self) -> dict[str, FieldValue]:
        return dict(self._fields)


__all__ = [
    "IDENTITY_FIELDS",
    "INDUSTRY_FIELD",
    "NAME_FIELD",
    "TICKER_FIELD",
    "Record",
    "as_float",
    "is_number",
]
