# -*- coding: utf-8 -*-
"""
Tiered greedy solver (topic passes + subtopic passes) and end-to-end runner.

optimize_space_utilization(topics, available_space, reference=None, policy=None)
  1) Topic passes: walk priority tiers high -> medium -> low, input order
     within a tier. Commit a topic iff its full estimated space fits under
     the tier ceiling (capacity * calibration.tier_fill(tier)); otherwise
     skip it. Main content is never partially included.
  2) Subtopic passes: walk subtopic tiers high -> medium -> low across the
     committed topics (commit order) against the full remaining budget.
  3) Build the TopicSelection list and attach suggestions for it.

calculate_optimal_topic_count(available_space, topics, reference=None)
  How many topics a budget holds (greedy prefix, or reference-scaled).

run_packing(topics, constraints, available_space, ..., tracker=None, selection=None)
  Solve, evaluate, build reduction strategies on overflow and a density
  report, writing the CSV artifacts through an optional Tracker.

Return values are fresh records; inputs are never mutated.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.heuristics.select_next.selector import priority_buckets
from sheetpack.planning.calibration import (
    CalibrationMode,
    Default,
    calibration_for,
)
from sheetpack.planning.density import optimize_content_density
from sheetpack.planning.policy import DEFAULT_POLICY, Policy
from sheetpack.planning.reduction import create_content_reduction_strategy
from sheetpack.planning.solution import (
    DensityOptimization,
    ReductionStrategy,
    SpaceOptimizationResult,
    SpaceUtilizationInfo,
    SubtopicSelection,
    TopicSelection,
)
from sheetpack.planning.state import PackingState, RuntimeBudget
from sheetpack.planning.suggestions import generate_space_suggestions
from sheetpack.planning.tracker import Tracker
from sheetpack.planning.utilization import calculate_space_utilization

logger = logging.getLogger(__name__)

_STYLE_COUNT_FACTOR: Dict[str, float] = {
    "hierarchical": 0.9,
    "flat": 1.1,
    "mixed": 1.0,
}


# ---------------------------------------------------------------------------
# Optimal topic count
# ---------------------------------------------------------------------------
def _greedy_prefix_count(available_space: float, topics: Sequence[OrganizedTopic]) -> int:
    used = 0.0
    for count, topic in enumerate(topics):
        if used + space_of(topic) > available_space:
            return count
        used += space_of(topic)
    return len(topics)


def calculate_optimal_topic_count(
    available_space: float,
    topics: Sequence[OrganizedTopic],
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> int:
    """
    Default: number of topics (input order) included before the running
    total would exceed the budget, in [0, len(topics)].

    Reference-guided: floor(topic_count * available / content_density),
    scaled by the organization style. A non-positive reference density uses
    the greedy prefix instead. Either way the count is clamped to
    [1, len(topics)] when the budget is positive and topics exist.
    """
    mode = calibration_for(reference)
    if not topics or available_space <= 0.0:
        return 0

    if isinstance(mode, Default):
        return _greedy_prefix_count(available_space, topics)

    ref = mode.reference
    if ref.content_density > 0.0:
        scaled = math.floor(ref.topic_count * (available_space / ref.content_density))
        adjusted = math.floor(scaled * _STYLE_COUNT_FACTOR.get(ref.organization_style, 1.0))
    else:
        adjusted = _greedy_prefix_count(available_space, topics)
    return min(max(adjusted, 1), len(topics))


# ---------------------------------------------------------------------------
# Tiered greedy packing
# ---------------------------------------------------------------------------
def _pack_topics(
    topics: Sequence[OrganizedTopic],
    budget: RuntimeBudget,
    mode: CalibrationMode,
    policy: Policy,
) -> List[OrganizedTopic]:
    committed: List[OrganizedTopic] = []
    for tier, bucket in priority_buckets(topics):
        ceiling = budget.capacity * mode.tier_fill(tier)
        for topic in bucket:
            space = space_of(topic)
            if budget.charge(space, ceiling=ceiling, eps=policy.eps):
                committed.append(topic)
                logger.debug(
                    "Committed topic %s (%s, %.0f units); used %.0f/%.0f",
                    topic.id, tier, space, budget.used, budget.capacity,
                )
            else:
                logger.debug(
                    "Skipped topic %s (%s, %.0f units); ceiling %.0f, used %.0f",
                    topic.id, tier, space, ceiling, budget.used,
                )
    return committed


def _pack_subtopics(
    committed: Sequence[OrganizedTopic],
    budget: RuntimeBudget,
    policy: Policy,
) -> Dict[str, List[str]]:
    chosen: Dict[str, List[str]] = {t.id: [] for t in committed}
    for tier in ("high", "medium", "low"):
        for topic in committed:
            for sub in topic.subtopics:
                if priority_of(sub) != tier:
                    continue
                if budget.charge(space_of(sub), eps=policy.eps):
                    chosen[topic.id].append(sub.id)
                    logger.debug("Committed subtopic %s under %s", sub.id, topic.id)
    return chosen


def optimize_space_utilization(
    topics: Sequence[OrganizedTopic],
    available_space: float,
    reference: Optional[ReferenceFormatAnalysis] = None,
    policy: Optional[Policy] = None,
) -> SpaceOptimizationResult:
    """
    Select topics and subtopics for the budget.

    A lower tier is never visited before a higher one, so higher-priority
    content is always committed first. Ties inside a tier go to the earlier
    input. Non-positive budgets give an empty result with score 0.
    """
    mode = calibration_for(reference)
    policy = policy or DEFAULT_POLICY

    state = PackingState(topics=list(topics), available_space=max(0.0, float(available_space)))
    if state.available_space <= 0.0:
        logger.info("No space available; nothing selected")
        return SpaceOptimizationResult(
            recommended_topics=[],
            recommended_subtopics=[],
            utilization_score=0.0,
            suggestions=[],
            estimated_final_utilization=0.0,
            used_space=0.0,
            available_space=0.0,
        )

    budget = state.to_runtime()
    committed = _pack_topics(state.topics, budget, mode, policy)
    chosen = _pack_subtopics(committed, budget, policy)

    selection = build_selection(committed, chosen)
    suggestions = generate_space_suggestions(
        selection, state.available_space, state.topics, reference=reference, policy=policy
    )
    score = max(0.0, min(1.0, budget.used / state.available_space))

    logger.info(
        "Packed %d/%d topics (%d subtopics) into %.0f/%.0f units (%.1f%%)%s",
        len(committed), len(state.topics), sum(len(v) for v in chosen.values()),
        budget.used, state.available_space, 100.0 * score,
        "" if isinstance(mode, Default) else " [reference-guided]",
    )
    return SpaceOptimizationResult(
        recommended_topics=[t.id for t in committed],
        recommended_subtopics=[SubtopicSelection(t.id, tuple(chosen[t.id])) for t in committed],
        utilization_score=score,
        suggestions=suggestions,
        estimated_final_utilization=score,
        used_space=budget.used,
        available_space=state.available_space,
    )


def build_selection(
    committed: Sequence[OrganizedTopic],
    chosen: Dict[str, List[str]],
) -> List[TopicSelection]:
    """TopicSelections charging each topic's space plus its chosen subtopics."""
    out: List[TopicSelection] = []
    for topic in committed:
        sub_ids = chosen.get(topic.id, [])
        extra = sum(space_of(topic.subtopic(sid)) for sid in sub_ids if topic.subtopic(sid))
        out.append(
            TopicSelection(
                topic_id=topic.id,
                subtopic_ids=tuple(sub_ids),
                priority=priority_of(topic),
                estimated_space=space_of(topic) + extra,
            )
        )
    return out


def selection_from_result(
    result: SpaceOptimizationResult,
    topics: Sequence[OrganizedTopic],
) -> List[TopicSelection]:
    """Rebuild the TopicSelection list a result describes."""
    by_id = {t.id: t for t in topics}
    committed = [by_id[tid] for tid in result.recommended_topics if tid in by_id]
    chosen = {s.topic_id: list(s.subtopic_ids) for s in result.recommended_subtopics}
    return build_selection(committed, chosen)


# ---------------------------------------------------------------------------
# End-to-end run
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class PackingReport:
    """Everything one run produces."""
    result: SpaceOptimizationResult
    selection: List[TopicSelection]
    utilization: SpaceUtilizationInfo
    density: DensityOptimization
    reduction_strategies: List[ReductionStrategy]


def run_packing(
    topics: Sequence[OrganizedTopic],
    constraints: SpaceConstraints,
    available_space: float,
    reference: Optional[ReferenceFormatAnalysis] = None,
    policy: Optional[Policy] = None,
    tracker: Optional[Tracker] = None,
    selection: Optional[Sequence[TopicSelection]] = None,
) -> PackingReport:
    """
    Solve, then evaluate a selection: the caller's `selection` when given
    (e.g. one edited by a user), otherwise the solver's own.

    Steps:
      1) optimize_space_utilization
      2) calculate_space_utilization on the chosen selection
      3) create_content_reduction_strategy when the selection overflows
      4) optimize_content_density
      5) write artifacts via `tracker` (if given)
    """
    policy = policy or DEFAULT_POLICY
    result = optimize_space_utilization(topics, available_space, reference=reference, policy=policy)
    selection = list(selection) if selection is not None else selection_from_result(result, topics)

    info = calculate_space_utilization(
        selection, available_space, topics, reference=reference, policy=policy
    )
    overflow = info.used_space - available_space
    strategies = create_content_reduction_strategy(selection, topics, overflow) if overflow > 0 else []
    density = optimize_content_density(selection, topics, constraints, reference=reference)

    if tracker is not None:
        tracker.write_selection_csv(topics=topics, selection=selection)
        tracker.write_suggestions_csv(suggestions=info.suggestions)
        tracker.write_utilization_summary_csv(selection=selection, topics=topics, info=info)
        tracker.write_reduction_strategies_csv(strategies=strategies)
        tracker.write_density_actions_csv(density=density)

    return PackingReport(
        result=result,
        selection=selection,
        utilization=info,
        density=density,
        reduction_strategies=strategies,
    )
