# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Application use cases."""
