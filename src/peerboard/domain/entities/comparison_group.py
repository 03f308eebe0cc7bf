# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Comparison Group Entity

Purpose:
    A named set of companies compared as a single synthetic entity. Members
    are weak references by company id; a group tolerates ids that no longer
    exist or whose data has not loaded yet. A group never owns a record: its
    record is rebuilt from current member data on demand.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from peerboard.domain.exceptions.entities import InvalidGroupError

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class ComparisonGroup(BaseEntity):
    """Group of companies.

    Args:
        group_id: Stable group identifier, used as the synthetic record's
            ticker.
        name: Display name.
        member_ids: Ordered member company ids; duplicates are dropped while
            preserving first occurrence.

    Raises:
        InvalidGroupError: If ``group_id`` or ``name`` is blank.
    """

    is_group: ClassVar[bool] = True

    group_id: str
    name: str
    member_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.group_id.strip():
            raise InvalidGroupError("group_id must be non-empty")
        if not self.name.strip():
            raise InvalidGroupError("group name must be non-empty", details={"id": self.group_id})
        object.__setattr__(self, "member_ids", tuple(dict.fromkeys(self.member_ids)))

    @property
    def label(self) -> str:
        return self.name

    def __contains__(self, company_id: object) -> bool:
        return company_id in self.member_ids


__all__ = ["ComparisonGroup"]
