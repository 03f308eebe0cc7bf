# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Peerboard: company and peer-group metric engine."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
