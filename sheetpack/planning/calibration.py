# -*- coding: utf-8 -*-
"""
Calibration mode: how much a reference document steers an operation.

    CalibrationMode = Default | ReferenceGuided(reference)

Operations call `calibration_for(reference)` once at the top and dispatch on
the variant; nothing below that point checks for an optional reference.

Tier ceilings
-------------
Under reference guidance the solver may hold medium/low tiers back to a
fraction of the budget, leaving room the reference layout would keep empty.
The high tier always sees the full budget.

    hierarchical -> medium 0.90, low 0.90
    mixed        -> medium 0.95, low 0.95
    flat         -> medium 1.00, low 1.00
    multi-column layout pattern -> low tier loses another 0.05
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Union

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis

_STYLE_FILL: Dict[str, float] = {
    "hierarchical": 0.90,
    "mixed": 0.95,
    "flat": 1.00,
}
_MULTI_COLUMN_RESERVE: float = 0.05


@dataclass(frozen=True)
class Default:
    """No reference: every tier may use the whole budget."""

    def tier_fill(self, tier: str) -> float:
        return 1.0


@dataclass(frozen=True)
class ReferenceGuided:
    """Calibrate against a reference document's measured layout."""
    reference: ReferenceFormatAnalysis

    def tier_fill(self, tier: str) -> float:
        if tier == "high":
            return 1.0
        fill = _STYLE_FILL.get(self.reference.organization_style, 1.0)
        if tier == "low" and self.reference.layout_pattern == "multi-column":
            fill -= _MULTI_COLUMN_RESERVE
        return fill


CalibrationMode = Union[Default, ReferenceGuided]


def calibration_for(reference: Optional[ReferenceFormatAnalysis]) -> CalibrationMode:
    if reference is None:
        return Default()
    return ReferenceGuided(reference=reference)
