# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Transport-agnostic DTOs for workspace snapshots."""
