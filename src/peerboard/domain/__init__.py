# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Domain layer: entities, enums, exceptions, and pure services."""
