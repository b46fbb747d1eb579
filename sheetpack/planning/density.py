# -*- coding: utf-8 -*-
"""
Density alignment: how full the pages are versus how full they should be.

target_density
    constraints.target_utilization, or with a reference:
    default + 0.5 * (reference_fill - default) + organization bias,
    clamped to [0.5, 1.0], where
    reference_fill = content_density * pages / available_space.

current_density = used / available (0 when available is 0)
density_gap     = target - current
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.business_objects.topics import OrganizedTopic
from sheetpack.heuristics.estimate.footprint import calculate_available_space
from sheetpack.planning.calibration import Default, calibration_for
from sheetpack.planning.solution import DensityAction, DensityOptimization, TopicSelection
from sheetpack.quality_metrics.core import (
    compute_reference_alignment,
    total_used_space,
    utilization_fraction,
)

logger = logging.getLogger(__name__)

_GAP_TOLERANCE: float = 0.1
_REFERENCE_PULL: float = 0.5
_MIN_TARGET: float = 0.5
_MAX_TARGET: float = 1.0
_NEUTRAL_ALIGNMENT: float = 0.5
_MIN_SHIFT: float = 0.01

# Hierarchical layouts need more whitespace, flat ones pack tighter
_ORGANIZATION_BIAS: Dict[str, float] = {
    "hierarchical": -0.02,
    "flat": 0.02,
    "mixed": 0.01,
}


def _target_density(
    constraints: SpaceConstraints,
    available: float,
    reference: ReferenceFormatAnalysis,
) -> float:
    default = float(constraints.target_utilization)
    if available > 0.0:
        reference_fill = reference.content_density * max(0, constraints.available_pages) / available
    else:
        reference_fill = default
    target = (
        default
        + _REFERENCE_PULL * (reference_fill - default)
        + _ORGANIZATION_BIAS.get(reference.organization_style, 0.0)
    )
    target = max(_MIN_TARGET, min(_MAX_TARGET, target))
    # a reference always moves the target off the unguided default
    if abs(target - default) < _MIN_SHIFT:
        can_rise = default + _MIN_SHIFT <= _MAX_TARGET
        if can_rise and (reference_fill >= default or default - _MIN_SHIFT < _MIN_TARGET):
            target = default + _MIN_SHIFT
        else:
            target = default - _MIN_SHIFT
    return target


def _actions(gap: float, multi_column: bool) -> List[DensityAction]:
    actions: List[DensityAction] = []
    if gap > _GAP_TOLERANCE:
        actions.append(DensityAction(
            type="increase_density",
            target_area="topics",
            description="Add more topics or expand existing content to reach the target density",
            impact=gap * 0.6,
        ))
        actions.append(DensityAction(
            type="increase_density",
            target_area="subtopics",
            description="Include additional subtopics from selected topics",
            impact=gap * 0.4,
        ))
        if multi_column:
            actions.append(DensityAction(
                type="increase_density",
                target_area="spacing",
                description="Tighten column gutters and spacing between sections",
                impact=gap * 0.1,
            ))
    elif gap < -_GAP_TOLERANCE:
        actions.append(DensityAction(
            type="decrease_density",
            target_area="topics",
            description="Remove lower-priority topics to reach the target density",
            impact=abs(gap) * 0.7,
        ))
        actions.append(DensityAction(
            type="decrease_density",
            target_area="spacing",
            description="Loosen spacing and formatting to reduce density",
            impact=abs(gap) * 0.3,
        ))
    else:
        actions.append(DensityAction(
            type="maintain_density",
            target_area="formatting",
            description="Current density is close to the target; maintain with fine-tuning",
            impact=0.0,
        ))
        if multi_column:
            actions.append(DensityAction(
                type="maintain_density",
                target_area="spacing",
                description="Balance content evenly across columns",
                impact=0.0,
            ))
    return actions


def optimize_content_density(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> DensityOptimization:
    """Density report with ordered actions; the first action names the direction."""
    mode = calibration_for(reference)
    available = float(calculate_available_space(constraints))
    current = utilization_fraction(total_used_space(selection), available)

    if isinstance(mode, Default):
        target = float(constraints.target_utilization)
        alignment = _NEUTRAL_ALIGNMENT
    else:
        target = _target_density(constraints, available, mode.reference)
        alignment = compute_reference_alignment(selection, all_topics, mode.reference)

    gap = target - current
    result = DensityOptimization(
        current_density=current,
        target_density=target,
        density_gap=gap,
        optimization_actions=_actions(gap, constraints.columns > 1),
        reference_alignment=alignment,
    )
    logger.debug(
        "Density current=%.3f target=%.3f gap=%.3f alignment=%.2f",
        current, target, gap, alignment,
    )
    return result
