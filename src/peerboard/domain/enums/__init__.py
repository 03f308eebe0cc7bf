# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Domain enumerations."""
