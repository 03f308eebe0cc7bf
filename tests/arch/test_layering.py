# tests/arch/test_layering.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Clean Architecture layering guardrail using grimp import graph.

This test builds an import graph for the `peerboard` package and enforces
a strict layering policy:

    domain         → may depend only on domain
    application    → may depend on {domain, application}
    adapters       → may depend on {domain, application, adapters, infrastructure}
    infrastructure → may depend on {domain, application, adapters, infrastructure}

Top-level modules outside these layers (config, tasks, types) are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

import grimp
from grimp import ImportGraph

ROOT_PACKAGE: Final[str] = "peerboard"
LAYERS: Final[frozenset[str]] = frozenset({"domain", "application", "adapters", "infrastructure"})

ALLOWED_DEPENDENCIES: Mapping[str, set[str]] = {
    "domain": {"domain"},
    "application": {"domain", "application"},
    "adapters": {"domain", "application", "adapters", "infrastructure"},
    "infrastructure": {"domain", "application", "adapters", "infrastructure"},
}


def _build_graph() -> ImportGraph:
    return grimp.build_graph(ROOT_PACKAGE)


def _layer_for_module(module_name: str) -> str | None:
    """Return the layer of ``module_name``, or ``None`` outside the layer matrix."""
    if not module_name.startswith(f"{ROOT_PACKAGE}."):
        return None
    top = module_name[len(ROOT_PACKAGE) + 1 :].split(".", 1)[0]
    return top if top in LAYERS else None


def _find_layering_violations(graph: ImportGraph) -> list[str]:
    violations: set[str] = set()
    for importer in sorted(graph.modules):
        importer_layer = _layer_for_module(importer)
        if importer_layer is None:
            continue

        allowed_targets = ALLOWED_DEPENDENCIES[importer_layer]
        for imported in graph.find_modules_directly_imported_by(importer):
            imported_layer = _layer_for_module(imported)
            if imported_layer is not None and imported_layer not in allowed_targets:
                violations.add(
                    f"{importer} ({importer_layer}) -> {imported} ({imported_layer}) "
                    "is not allowed by ALLOWED_DEPENDENCIES"
                )
    return sorted(violations)


def test_layering_respects_clean_architecture() -> None:
    """Ensure that high-level layering rules are respected."""
    violations = _find_layering_violations(_build_graph())

    if violations:
        message = "Layering violations detected:\n" + "\n".join(violations)
        raise AssertionError(message)

