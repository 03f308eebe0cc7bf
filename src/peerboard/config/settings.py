# src/peerboard/config/settings.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Peerboard Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the metric engine, exporters, and CLI.
    The domain layer never reads settings; the application façade and the
    CLI receive a `Settings` instance and pass plain values down.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown keys.
    - Explicit field declarations with constrained types and ranges.
    - Singleton accessor `get_settings()` with LRU cache.
    - Safe, structured logging of the resolved configuration.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for Peerboard."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level name (DEBUG, INFO, WARNING, ERROR).",
        validation_alias="LOG_LEVEL",
    )

    no_data_marker: str = Field(
        default="N/A",
        min_length=1,
        description="Text rendered for missing, NaN, or infinite metric values.",
        validation_alias="PEERBOARD_NO_DATA_MARKER",
    )

    currency_symbol: str = Field(
        default="$",
        description="Prefix used when formatting currency values.",
        validation_alias="PEERBOARD_CURRENCY_SYMBOL",
    )

    max_formula_length: int = Field(
        default=2000,
        ge=1,
        le=100_000,
        description="Maximum accepted custom-formula length in characters.",
        validation_alias="PEERBOARD_MAX_FORMULA_LENGTH",
    )

    export_sheet_name: str = Field(
        default="Comparison",
        min_length=1,
        max_length=31,
        description="Worksheet title used by the XLSX exporter (Excel caps titles at 31).",
        validation_alias="PEERBOARD_EXPORT_SHEET_NAME",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
        logger.info(
            "Settings initialized",
            extra={
                "extra": {
                    "environment": settings.environment.value,
                    "log_level": settings.log_level,
                    "no_data_marker": settings.no_data_marker,
                    "currency_symbol": settings.currency_symbol,
                    "max_formula_length": settings.max_formula_length,
                    "export_sheet_name": settings.export_sheet_name,
                }
            },
        )
        return settings
    except ValidationError as exc:
        logger.exception("Invalid configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
