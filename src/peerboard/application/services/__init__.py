# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Application services."""
