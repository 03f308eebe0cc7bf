# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Entity Invariant Exceptions

Purpose:
    Errors raised when a record, company, group, or custom metric is built
    from values that violate its invariants.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidRecordError(DomainError):
    """A record is missing its identity fields or holds an unsupported value."""

    code = "INVALID_RECORD"


class InvalidCustomMetricError(DomainError):
    """A custom metric definition is malformed (e.g., ``text`` output format)."""

    code = "INVALID_CUSTOM_METRIC"


class InvalidGroupError(DomainError):
    """A comparison group definition is malformed."""

    code = "INVALID_GROUP"


class InvalidCompanyError(DomainError):
    """A company entity is malformed or in an inconsistent fetch state."""

    code = "INVALID_COMPANY"
