# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Immutable domain entities."""
