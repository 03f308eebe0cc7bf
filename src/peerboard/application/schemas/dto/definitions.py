# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Workspace DTOs (Application Layer).

Synopsis:
    Strict transport models for persisted workspace snapshots: tracked
    companies with their last fetched record, comparison groups, custom
    metric definitions, the key-metric shortlist, and the scoring
    configuration. Field aliases follow the camelCase keys of stored
    snapshots; snake_case names are accepted too. Unknown keys are rejected.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from pydantic import (
    ConfigDict,
    Field,
    RootModel,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from peerboard.application.schemas.dto.base import BaseDTO
from peerboard.domain.entities.company import Company
from peerboard.domain.entities.comparison_group import ComparisonGroup
from peerboard.domain.entities.custom_metric import DEFAULT_PRIORITY, MAX_PRIORITY, CustomMetric
from peerboard.domain.entities.record import Record
from peerboard.domain.entities.workspace import Workspace
from peerboard.domain.enums.fetch_status import FetchStatus
from peerboard.domain.enums.metric_format import MetricFormat
from peerboard.domain.enums.scoring import BetterDirection, NormalizationMethod
from peerboard.domain.services.scoring_config import (
    DEFAULT_MAX_METRICS_PER_CATEGORY,
    DEFAULT_MIN_DATA_COMPLETENESS,
    ScoringCategoryConfig,
    ScoringConfiguration,
    ScoringMetricConfig,
)

type RecordValueDTO = StrictInt | StrictFloat | StrictStr | None


class RecordFieldsDTO(RootModel[dict[str, RecordValueDTO]]):
    """Open-schema field map of one fetched record.

    Values must be numbers, strings, or null; booleans are rejected even
    though JSON `true` would otherwise coerce to a number.
    """

    @field_validator("root", mode="before")
    @classmethod
    def _reject_booleans(cls, value: object) -> object:
        if isinstance(value, dict):
            flagged = sorted(str(k) for k, v in value.items() if isinstance(v, bool))
            if flagged:
                raise ValueError(f"boolean values are not allowed in records: {flagged}")
        return value


class CustomMetricDTO(BaseDTO):
    """User-authored formula metric.

    Attributes:
        id: Stable metric identifier.
        name: Display name.
        format: Output format tag; ``text`` is rejected.
        formula: Arithmetic expression over record field names.
        priority: Scoring weight 0-10; the default applies when omitted.
        better_direction: Favourable direction (``betterDirection``).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    format: MetricFormat
    formula: str
    priority: int | None = Field(default=None, ge=0, le=MAX_PRIORITY)
    better_direction: BetterDirection | None = Field(default=None, alias="betterDirection")

    def to_domain(self) -> CustomMetric:
        return CustomMetric(
            metric_id=self.id,
            name=self.name,
            format=self.format,
            formula=self.formula,
            priority=DEFAULT_PRIORITY if self.priority is None else self.priority,
            better_direction=self.better_direction,
        )


class ComparisonGroupDTO(BaseDTO):
    """Named set of company ids compared as one entity.

    Attributes:
        id: Stable group identifier.
        name: Display name.
        company_ids: Member company ids in display order.
        is_group: Storage discriminator; always ``True`` when present.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    company_ids: list[str] = Field(default_factory=list, alias="companyIds")
    is_group: bool = Field(default=True, alias="isGroup")

    @field_validator("is_group")
    @classmethod
    def _must_be_group(cls, value: bool) -> bool:
        if not value:
            raise ValueError("isGroup must be true for a comparison group")
        return value

    def to_domain(self) -> ComparisonGroup:
        return ComparisonGroup(group_id=self.id, name=self.name, member_ids=tuple(self.company_ids))


class CompanySnapshotDTO(BaseDTO):
    """Tracked company with its last fetched record.

    Attributes:
        id: Stable company identifier.
        ticker: Symbol as entered by the user.
        status: Fetch state; inferred from ``error``, ``is_loading`` and
            ``record`` when omitted.
        error: Failure reason for a failed fetch.
        record: Open-schema field map (``rawData`` in stored snapshots).
        is_loading: A fetch is in flight (``isLoading``).
        last_updated: Epoch milliseconds of the last fetch (``lastUpdated``).
        api_providers: Providers that supplied the record (``apiProviders``).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1)
    ticker: str = Field(..., min_length=1)
    status: FetchStatus | None = None
    error: str | None = None
    record: RecordFieldsDTO | None = Field(default=None, alias="rawData")
    is_loading: bool = Field(default=False, alias="isLoading")
    last_updated: int | None = Field(default=None, ge=0, alias="lastUpdated")
    api_providers: list[str] = Field(default_factory=list, alias="apiProviders")

    def resolved_status(self) -> FetchStatus:
        if self.status is not None:
            return self.status
        if self.error:
            return FetchStatus.FAILED
        if self.is_loading:
            return FetchStatus.LOADING
        return FetchStatus.LOADED if self.record is not None else FetchStatus.NOT_LOADED

    def to_domain(self) -> Company:
        return Company(
            company_id=self.id,
            ticker=self.ticker,
            record=Record(self.record.root) if self.record is not None else None,
            status=self.resolved_status(),
            error=self.error,
        )


class ScoringMetricConfigDTO(BaseDTO):
    """One metric's weight inside its scoring category."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    metric_id: str = Field(..., min_length=1, alias="metricId")
    enabled: bool = True
    weight: float = Field(..., ge=0)
    category: str = ""


class ScoringCategoryConfigDTO(BaseDTO):
    """A scoring category with its weight and metrics."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    category: str = Field(..., min_length=1)
    enabled: bool = True
    weight: float = Field(..., ge=0)
    metrics: list[ScoringMetricConfigDTO] = Field(default_factory=list)

    def to_domain(self) -> ScoringCategoryConfig:
        return ScoringCategoryConfig(
            category=self.category,
            weight=self.weight,
            enabled=self.enabled,
            metrics=tuple(
                ScoringMetricConfig(
                    metric_id=m.metric_id,
                    weight=m.weight,
                    category=m.category or self.category,
                    enabled=m.enabled,
                )
                for m in self.metrics
            ),
        )


class ScoringConfigurationDTO(BaseDTO):
    """Stored category scoring configuration (``scoringConfig``).

    Range rules (weights summing to 100, completeness within 0-1) are checked
    by the domain validator so every problem is reported at once.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    categories: list[ScoringCategoryConfigDTO] = Field(default_factory=list)
    normalization_method: NormalizationMethod = Field(
        default=NormalizationMethod.PERCENTILE, alias="normalizationMethod"
    )
    include_missing_data: bool = Field(default=False, alias="includeMissingData")
    min_data_completeness: float = Field(
        default=DEFAULT_MIN_DATA_COMPLETENESS, alias="minDataCompleteness"
    )
    max_metrics_per_category: int = Field(
        default=DEFAULT_MAX_METRICS_PER_CATEGORY, alias="maxMetricsPerCategory"
    )

    def to_domain(self) -> ScoringConfiguration:
        return ScoringConfiguration(
            categories=tuple(c.to_domain() for c in self.categories),
            normalization_method=self.normalization_method,
            include_missing_data=self.include_missing_data,
            min_data_completeness=self.min_data_completeness,
            max_metrics_per_category=self.max_metrics_per_category,
        )


class WorkspaceSnapshotDTO(BaseDTO):
    """Persisted comparison workspace.

    Attributes:
        companies: Tracked companies.
        groups: Comparison groups.
        custom_metrics: Custom formula metrics (``customMetrics`` when stored).
        key_metrics: Shortlisted metric ids in display order (``keyMetrics``).
        scoring_config: Saved category scoring setup (``scoringConfig``).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    companies: list[CompanySnapshotDTO] = Field(default_factory=list)
    groups: list[ComparisonGroupDTO] = Field(default_factory=list)
    custom_metrics: list[CustomMetricDTO] = Field(default_factory=list, alias="customMetrics")
    key_metrics: list[str] = Field(default_factory=list, alias="keyMetrics")
    scoring_config: ScoringConfigurationDTO | None = Field(default=None, alias="scoringConfig")

    def to_domain(self) -> Workspace:
        """Convert to domain entities.

        Raises:
            DomainError: If any entity violates its invariants.
        """
        return Workspace(
            companies=tuple(c.to_domain() for c in self.companies),
            groups=tuple(g.to_domain() for g in self.groups),
            custom_metrics=tuple(m.to_domain() for m in self.custom_metrics),
            key_metrics=tuple(dict.fromkeys(self.key_metrics)),
            scoring_config=self.scoring_config.to_domain() if self.scoring_config else None,
        )


__all__ = [
    "ComparisonGroupDTO",
    "CompanySnapshotDTO",
    "CustomMetricDTO",
    "RecordFieldsDTO",
    "ScoringCategoryConfigDTO",
    "ScoringConfigurationDTO",
    "ScoringMetricConfigDTO",
    "WorkspaceSnapshotDTO",
]
