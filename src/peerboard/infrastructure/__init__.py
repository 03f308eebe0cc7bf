# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Infrastructure layer."""
