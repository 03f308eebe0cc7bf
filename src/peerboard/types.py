# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Project-wide typing helpers.

``FieldValue`` models a single record cell.
"""

from __future__ import annotations

type FieldValue = float | int | str | None

__all__ = ["FieldValue"]
