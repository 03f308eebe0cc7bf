# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Structured logging."""
