# -*- coding: utf-8 -*-
"""
Evaluation of a (possibly user-edited) selection against a budget.

  - calculate_space_utilization: used/remaining/percentage + suggestions
  - validate_topic_selection:    fit check for raw id lists
  - analyze_content_utilization: bands, ranked recommendations, density report
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.business_objects.topics import OrganizedTopic, space_of
from sheetpack.heuristics.estimate.footprint import calculate_available_space
from sheetpack.planning.calibration import ReferenceGuided, calibration_for
from sheetpack.planning.density import optimize_content_density
from sheetpack.planning.policy import DEFAULT_POLICY, Policy
from sheetpack.planning.reduction import create_content_reduction_strategy
from sheetpack.planning.solution import (
    ContentUtilizationAnalysis,
    SelectionValidation,
    SpaceUtilizationInfo,
    SubtopicSelection,
    TopicSelection,
    UtilizationRecommendation,
)
from sheetpack.planning.suggestions import (
    detect_empty_space_and_suggest_content,
    generate_space_suggestions,
)
from sheetpack.quality_metrics.core import (
    compute_reference_alignment,
    remaining_space,
    total_used_space,
    utilization_fraction,
)

logger = logging.getLogger(__name__)

_VALIDATION_LOW_WARNING: float = 0.5
_REDISTRIBUTE_BELOW: float = 0.7
_RECOMMENDATION_RANK: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}


def calculate_space_utilization(
    selected: Sequence[TopicSelection],
    available_space: float,
    all_topics: Sequence[OrganizedTopic],
    reference: Optional[ReferenceFormatAnalysis] = None,
    policy: Optional[Policy] = None,
) -> SpaceUtilizationInfo:
    """
    used = sum of estimated_space (missing counts as 0);
    remaining = max(0, available - used);
    percentage = used / available (0 when available is 0, never clamped).
    """
    used = total_used_space(selected)
    suggestions = generate_space_suggestions(
        selected, available_space, all_topics, reference=reference, policy=policy
    )
    info = SpaceUtilizationInfo(
        total_available_space=float(available_space),
        used_space=used,
        remaining_space=remaining_space(used, available_space),
        utilization_percentage=utilization_fraction(used, available_space),
        suggestions=suggestions,
    )
    logger.debug(
        "Utilization %.0f/%.0f (%.3f), %d suggestions",
        used, available_space, info.utilization_percentage, len(suggestions),
    )
    return info


def validate_topic_selection(
    topic_ids: Sequence[str],
    subtopic_selections: Sequence[SubtopicSelection],
    all_topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    policy: Optional[Policy] = None,
) -> SelectionValidation:
    """
    Check whether raw id lists fit the budget derived from `constraints`.

    A topic counts with its estimated space plus the estimated space of each
    listed subtopic. Unknown topic or subtopic ids count as 0.
    Valid iff utilization <= 1.0.
    """
    policy = policy or DEFAULT_POLICY
    available = float(calculate_available_space(constraints))
    by_id = {t.id: t for t in all_topics}
    subs_for: Dict[str, List[str]] = {}
    for s in subtopic_selections:
        subs_for.setdefault(s.topic_id, []).extend(s.subtopic_ids)

    used = 0.0
    for tid in topic_ids:
        topic = by_id.get(tid)
        if topic is None:
            logger.warning("Selected topic id '%s' not found; counted as 0", tid)
            continue
        used += space_of(topic)
        for sid in subs_for.get(tid, []):
            used += space_of(topic.subtopic(sid))

    utilization = utilization_fraction(used, available)
    is_valid = utilization <= policy.over_utilized

    warnings: List[str] = []
    suggestions: List[str] = []
    if utilization > policy.over_utilized:
        warnings.append(f"Content exceeds available space by {(utilization - 1.0) * 100:.1f}%")
        suggestions.append("Remove some low-priority topics or subtopics")
        suggestions.append("Consider increasing page count or using a smaller font size")
    elif utilization > policy.overflow_warning:
        warnings.append(
            "Content is very close to the space limit. Consider removing some low-priority items."
        )
    if utilization < _VALIDATION_LOW_WARNING:
        warnings.append("Space utilization is quite low. Consider adding more content.")
    if utilization < policy.under_utilized:
        suggestions.append("Add more topics or subtopics to better utilize available space")
        suggestions.append("Consider expanding existing topics with more details")

    return SelectionValidation(
        is_valid=is_valid,
        total_space=available,
        used_space=used,
        utilization_percentage=utilization,
        warnings=warnings,
        suggestions=suggestions,
    )


def _recommendations(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    available: float,
    utilization: float,
    reference: Optional[ReferenceFormatAnalysis],
    policy: Policy,
) -> List[UtilizationRecommendation]:
    mode = calibration_for(reference)
    used = total_used_space(selection)
    out: List[UtilizationRecommendation] = []

    if utilization < policy.under_utilized:
        additions = detect_empty_space_and_suggest_content(
            selection, all_topics, available, reference=reference
        )[:3]
        out.append(
            UtilizationRecommendation(
                type="add_content",
                priority="high",
                description=(
                    f"Space utilization is low ({utilization * 100:.1f}%). "
                    "Consider adding more content."
                ),
                target_ids=[s.subtopic_id or s.topic_id for s in additions],
                expected_space_impact=sum(s.estimated_space for s in additions),
                confidence_score=0.9,
                implementation_steps=[
                    "Review suggested topics and subtopics",
                    "Select high-relevance additions",
                    "Update topic selection",
                ],
            )
        )
    elif utilization < policy.expansion_upper:
        out.append(
            UtilizationRecommendation(
                type="expand_existing",
                priority="medium",
                description="Good utilization. Consider expanding existing topics with more details.",
                target_ids=[s.topic_id for s in selection[:2]],
                expected_space_impact=(available - used) * 0.5,
                confidence_score=0.7,
                implementation_steps=[
                    "Identify topics that could benefit from expansion",
                    "Add relevant examples or explanations",
                ],
            )
        )

    if utilization > policy.overflow_warning:
        strategies = create_content_reduction_strategy(selection, all_topics, used - available)
        if strategies:
            best = strategies[0]
            out.append(
                UtilizationRecommendation(
                    type="reduce_content",
                    priority="high",
                    description=(
                        f"Content overflow detected. "
                        f"{best.reduction_type.replace('_', ' ')} recommended."
                    ),
                    target_ids=list(best.target_ids),
                    expected_space_impact=-best.space_recovered,
                    confidence_score=best.preservation_score,
                    implementation_steps=[
                        "Review the reduction strategy",
                        "Apply recommended changes",
                        "Verify the final layout fits",
                    ],
                )
            )

    if isinstance(mode, ReferenceGuided):
        alignment = compute_reference_alignment(selection, all_topics, mode.reference)
        if alignment < _REDISTRIBUTE_BELOW:
            out.append(
                UtilizationRecommendation(
                    type="redistribute",
                    priority="medium",
                    description=(
                        "Content does not align well with the reference format. "
                        "Consider redistributing topics."
                    ),
                    target_ids=[s.topic_id for s in selection],
                    expected_space_impact=0.0,
                    confidence_score=alignment,
                    implementation_steps=[
                        "Adjust topic selection to match the reference density",
                        "Reorganize content to match the reference structure",
                    ],
                )
            )

    out.sort(key=lambda r: _RECOMMENDATION_RANK[r.priority])
    return out


def analyze_content_utilization(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    reference: Optional[ReferenceFormatAnalysis] = None,
    policy: Optional[Policy] = None,
) -> ContentUtilizationAnalysis:
    """
    Utilization report for a selection under `constraints`.

    empty_space_detected  <- utilization < policy.under_utilized (0.7)
    overflow_detected     <- utilization > policy.overflow_warning (0.95)
    Recommendations are ordered high priority first.
    """
    policy = policy or DEFAULT_POLICY
    available = float(calculate_available_space(constraints))
    used = total_used_space(selection)
    utilization = utilization_fraction(used, available)

    analysis = ContentUtilizationAnalysis(
        utilization_percentage=utilization,
        empty_space_detected=utilization < policy.under_utilized,
        overflow_detected=utilization > policy.overflow_warning,
        recommendations=_recommendations(
            selection, all_topics, available, utilization, reference, policy
        ),
        density_optimization=optimize_content_density(
            selection, all_topics, constraints, reference=reference
        ),
    )
    logger.info(
        "Utilization analysis: %.1f%% (empty=%s, overflow=%s, %d recommendations)",
        utilization * 100, analysis.empty_space_detected, analysis.overflow_detected,
        len(analysis.recommendations),
    )
    return analysis
