# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Application-layer schemas."""
