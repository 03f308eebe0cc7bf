# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Operational CLI entry points."""
