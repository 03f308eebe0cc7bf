# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Adapters layer."""
