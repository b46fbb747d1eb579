# -*- coding: utf-8 -*-
"""
Advisory helpers around a topic pool and a page configuration.

  - suggest_optimal_configuration: nudge font size / page count toward a fit
  - space_utilization_tips:        short human-readable hints (at most 5)
  - generate_space_recommendations: optimal count + configuration + tips
  - apply_optimization:            mark the subtopics a result selected
"""

from __future__ import annotations
import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.heuristics.estimate.footprint import calculate_available_space
from sheetpack.planning.calibration import ReferenceGuided, calibration_for
from sheetpack.planning.solution import SpaceOptimizationResult, SpaceRecommendations
from sheetpack.planning.solvers.greedy import calculate_optimal_topic_count

logger = logging.getLogger(__name__)

_TIGHT_FIT: float = 0.95
_LOOSE_FIT: float = 0.6
_PAGE_GROWTH: float = 1.5
_PAGE_SHRINK: float = 0.8
_TWO_COLUMN_THRESHOLD: float = 15000.0
_MAX_TIPS: int = 5

_SMALLER_FONT = {"large": "medium", "medium": "small"}


def _demand_ratio(topics: Sequence[OrganizedTopic], available_space: float) -> float:
    total = sum(space_of(t) for t in topics)
    if available_space <= 0.0:
        return float("inf") if total > 0 else 0.0
    return total / available_space


def suggest_optimal_configuration(
    constraints: SpaceConstraints,
    topics: Sequence[OrganizedTopic],
    available_space: float,
) -> SpaceConstraints:
    """
    When the whole pool needs more than 95% of the budget, step the font
    down (large -> medium -> small) or, at small, grow pages by 1.5x.
    Below 60%, step small up to medium, or shrink a multi-page medium
    layout to 80% of its pages (at least one).
    """
    ratio = _demand_ratio(topics, available_space)
    suggested = constraints

    if ratio > _TIGHT_FIT:
        if constraints.font_size in _SMALLER_FONT:
            suggested = replace(constraints, font_size=_SMALLER_FONT[constraints.font_size])
        else:
            pages = max(1, math.ceil(constraints.available_pages * _PAGE_GROWTH))
            suggested = replace(constraints, available_pages=pages)
    elif ratio < _LOOSE_FIT:
        if constraints.font_size == "small":
            suggested = replace(constraints, font_size="medium")
        elif constraints.font_size == "medium" and constraints.available_pages > 1:
            pages = max(1, math.floor(constraints.available_pages * _PAGE_SHRINK))
            suggested = replace(constraints, available_pages=pages)

    if suggested != constraints:
        logger.debug("Configuration suggestion at demand %.2f: %s", ratio, suggested)
    return suggested


def space_utilization_tips(
    topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    available_space: float,
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> List[str]:
    mode = calibration_for(reference)
    ratio = _demand_ratio(topics, available_space)
    tips: List[str] = []

    if ratio > 1.0:
        tips.append(
            "Content exceeds available space. Consider removing low-priority topics "
            "or increasing the page count."
        )
        tips.append("Focus on high-priority topics and essential subtopics only.")
    elif ratio < _LOOSE_FIT:
        tips.append(
            "There is significant unused space. Consider adding topics or expanding existing content."
        )
        tips.append("Include additional subtopics or examples to make use of the room.")

    n = len(topics)
    high = sum(1 for t in topics if priority_of(t) == "high")
    low = sum(1 for t in topics if priority_of(t) == "low")
    if n and high < n * 0.3:
        tips.append("Consider marking more essential topics as high priority.")
    if n and low > n * 0.4:
        tips.append("Many topics are low priority; they will only fill space left over.")

    if constraints.columns == 1 and available_space > _TWO_COLUMN_THRESHOLD:
        tips.append("Consider a 2-column layout for this amount of content.")
    if constraints.font_size == "large" and ratio > 0.8:
        tips.append("Consider a medium font size to fit more content comfortably.")

    if isinstance(mode, ReferenceGuided) and available_space > 0.0:
        reference_ratio = mode.reference.content_density / available_space
        if ratio < reference_ratio * 0.7:
            tips.append("Content is sparser than the reference. Consider adding more detail.")
        elif ratio > reference_ratio * 1.3:
            tips.append(
                "Content is denser than the reference. Consider condensing or adding pages."
            )

    return tips[:_MAX_TIPS]


def generate_space_recommendations(
    topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> SpaceRecommendations:
    available = float(calculate_available_space(constraints))
    return SpaceRecommendations(
        optimal_topic_count=calculate_optimal_topic_count(available, topics, reference),
        suggested_configuration=suggest_optimal_configuration(constraints, topics, available),
        space_utilization_tips=space_utilization_tips(topics, constraints, available, reference),
    )


def apply_optimization(
    topics: Sequence[OrganizedTopic],
    result: SpaceOptimizationResult,
) -> List[OrganizedTopic]:
    """
    New topics (same order) whose subtopics carry is_selected from `result`.
    Subtopics of topics the result did not recommend are all unselected.
    """
    chosen = {s.topic_id: set(s.subtopic_ids) for s in result.recommended_subtopics}
    out: List[OrganizedTopic] = []
    for topic in topics:
        picked = chosen.get(topic.id, set())
        subs = tuple(replace(sub, is_selected=sub.id in picked) for sub in topic.subtopics)
        out.append(replace(topic, subtopics=subs))
    return out
