# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Company Entity

Purpose:
    Immutable representation of a tracked company, its owned record, and the
    status of the most recent fetch. State changes return new instances; the
    record is replaced wholesale and never edited field by field.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar

from peerboard.domain.entities.record import Record
from peerboard.domain.enums.fetch_status import FetchStatus
from peerboard.domain.exceptions.entities import InvalidCompanyError

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Company(BaseEntity):
    """Tracked company.

    Args:
        company_id: Stable entity identifier.
        ticker: Symbol as entered by the user.
        record: Last successfully fetched record, if any.
        status: Fetch lifecycle state.
        error: Failure reason; required when ``status`` is ``FAILED``.

    Raises:
        InvalidCompanyError: If identifiers are blank or the status and
            record/error fields disagree.
    """

    is_group: ClassVar[bool] = False

    company_id: str
    ticker: str
    record: Record | None = None
    status: FetchStatus = FetchStatus.NOT_LOADED
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.company_id.strip():
            raise InvalidCompanyError("company_id must be non-empty")
        if not self.ticker.strip():
            raise InvalidCompanyError("ticker must be non-empty", details={"id": self.company_id})
        if self.status is FetchStatus.LOADED and self.record is None:
            raise InvalidCompanyError(
                "a loaded company must carry a record", details={"id": self.company_id}
            )
        if self.status is FetchStatus.FAILED and not self.error:
            raise InvalidCompanyError(
                "a failed company must carry an error reason", details={"id": self.company_id}
            )
        if self.status is not FetchStatus.FAILED and self.error is not None:
            raise InvalidCompanyError(
                "error is only allowed on failed companies", details={"id": self.company_id}
            )

    @property
    def has_data(self) -> bool:
        """Whether the company contributes a record to views and aggregation."""
        return self.record is not None and self.status is not FetchStatus.FAILED

    @property
    def label(self) -> str:
        return self.ticker

    def begin_fetch(self) -> Company:
        """Return a copy marked as loading; the previous record is retained."""
        return replace(self, status=FetchStatus.LOADING, error=None)

    def with_record(self, record: Record) -> Company:
        """Return a copy holding a freshly fetched record."""
        return replace(self, record=record, status=FetchStatus.LOADED, error=None)

    def with_failure(self, reason: str) -> Company:
        """Return a copy marked as failed with ``reason``."""
        return replace(self, status=FetchStatus.FAILED, error=reason)


__all__ = ["Company"]
