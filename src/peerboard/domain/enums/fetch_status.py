# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Company fetch status enumeration."""

from __future__ import annotations

from enum import Enum


class FetchStatus(str, Enum):
    """Lifecycle of a company's record retrieval."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


__all__ = ["FetchStatus"]
