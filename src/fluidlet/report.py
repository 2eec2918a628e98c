"""
Registry Analyzer: diagnostics of fluid variables on the calling thread.

This module provides a lightweight inventory of a FluidRegistry:
    - Which cells are currently overridden, and how deeply
    - Which defaults have been materialized on this thread
    - Which cells have no default at all
    - Warning flags for likely misuse

IMPORTANT: This is read-only. It never runs initializers and never
installs or removes overrides. It only sees the calling thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from fluidlet.declare import FluidRegistry

# Nesting deeper than this on one thread usually means unbounded recursion
# through a binding.
DEEP_NESTING_THRESHOLD = 32


@dataclass
class RegistryReport:
    """Snapshot of a registry as seen from one thread."""

    total_cells: int = 0
    overridden: List[str] = field(default_factory=list)
    materialized: List[str] = field(default_factory=list)
    without_default: List[str] = field(default_factory=list)
    depths: Dict[str, int] = field(default_factory=dict)
    max_depth: int = 0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_registry(registry: FluidRegistry) -> RegistryReport:
    """
    Inspect every cell of a registry on the calling thread.

    Returns a RegistryReport with counts and warnings.
    """
    report = RegistryReport(total_cells=len(registry))

    for cell in registry:
        state = cell.state()
        report.depths[cell.name] = state.depth
        report.max_depth = max(report.max_depth, state.depth)
        if state.depth:
            report.overridden.append(cell.name)
        if state.materialized:
            report.materialized.append(cell.name)
        if cell.initializer is None:
            report.without_default.append(cell.name)

        if state.depth > DEEP_NESTING_THRESHOLD:
            report.add_warning(
                f"{cell.name} is nested {state.depth} levels deep; "
                f"check for recursion through a binding"
            )

    if report.without_default:
        report.add_warning(
            f"{len(report.without_default)} fluid variable(s) have no default; "
            f"reads outside a binding will find no value: {report.without_default}"
        )

    return report
