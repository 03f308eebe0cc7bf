# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Application layer: DTOs, the metric engine facade, and use cases."""
