# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""
Workspace Entity

Purpose:
    The set of companies, groups, and custom metrics being compared, with
    the key-metric shortlist and an optional saved scoring setup. Company
    and group records share one lookup keyed by entity id, so ids must be
    unique across both kinds.

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass

from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.custom_metric import CustomMetric
from peerboard.domain.exceptions.entities import InvalidGroupError
from peerboard.domain.services.scoring_config import ScoringConfiguration

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class Workspace(BaseEntity):
    """Comparison workspace.

    Raises:
        InvalidGroupError: If an id is shared by two entities.
    """

    companies: tuple[Company, ...] = ()
    groups: tuple[ComparisonGroup, ...] = ()
    custom_metrics: tuple[CustomMetric, ...] = ()
    key_metrics: tuple[str, ...] = ()
    scoring_config: ScoringConfiguration | None = None

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entity_id in [c.company_id for c in self.companies] + [g.group_id for g in self.groups]:
            if entity_id in seen:
                raise InvalidGroupError(
                    f"duplicate entity id: {entity_id}", details={"id": entity_id}
                )
            seen.add(entity_id)


__all__ = ["Workspace"]
