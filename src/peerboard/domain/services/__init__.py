# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Pure domain services (evaluation, aggregation, formatting, catalogue)."""
