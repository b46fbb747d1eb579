# -*- coding: utf-8 -*-
"""
Suggestion generation for a topic selection.

Two entry points:

  generate_space_suggestions(selection, available_space, all_topics, ...)
      Corrective SpaceSuggestions keyed on the utilization band:
        < under_utilized                      -> add_topic, add_subtopic
        [under_utilized, expansion_upper)     -> expand_content
        > over_utilized                       -> reduce_content

  detect_empty_space_and_suggest_content(selection, all_topics, available_space, ...)
      Concrete ContentExpansionSuggestions to fill leftover room.

Selections pointing at unknown topic ids still count toward used space but
are otherwise ignored.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis
from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.heuristics.estimate.footprint import EXAMPLE_SURCHARGE
from sheetpack.heuristics.select_next.features import (
    priority_rank,
    subtopic_relevance,
    topic_relevance,
)
from sheetpack.heuristics.select_next.selector import priority_buckets, rank_topics
from sheetpack.planning.calibration import (
    CalibrationMode,
    Default,
    ReferenceGuided,
    calibration_for,
)
from sheetpack.planning.policy import DEFAULT_POLICY, Policy
from sheetpack.planning.solution import (
    ContentExpansionSuggestion,
    SpaceSuggestion,
    TopicSelection,
)
from sheetpack.quality_metrics.core import total_used_space

logger = logging.getLogger(__name__)

_GROUP_ORDER: Tuple[str, ...] = ("add_topic", "add_subtopic", "expand_content", "reduce_content")
_HIERARCHICAL_GROUP_ORDER: Tuple[str, ...] = (
    "add_subtopic", "add_topic", "expand_content", "reduce_content",
)

# Empty-space detection
_EMPTY_SPACE_UTILIZATION: float = 0.8
_EMPTY_SPACE_MIN_REMAINING: float = 100.0
_DETAILS_MIN_REMAINING: float = 200.0
_DETAILS_SHARE: float = 0.3
_DETAILS_CAP: float = 300.0
_DETAILS_RELEVANCE: float = 0.7
_EXAMPLES_RELEVANCE: float = 0.6
_MAX_NEW_TOPICS: int = 3
_MAX_SUBTOPICS_PER_TOPIC: int = 2
_MAX_EXPANSIONS: int = 5
_HIERARCHICAL_MAX_EXPANSIONS: int = 4


def _split_known(
    selection: Sequence[TopicSelection],
    by_id: Dict[str, OrganizedTopic],
) -> List[Tuple[TopicSelection, OrganizedTopic]]:
    known: List[Tuple[TopicSelection, OrganizedTopic]] = []
    for sel in selection:
        topic = by_id.get(sel.topic_id)
        if topic is None:
            logger.warning("Selection references unknown topic id '%s'; ignored", sel.topic_id)
            continue
        known.append((sel, topic))
    return known


# ---------------------------------------------------------------------------
# Band handlers
# ---------------------------------------------------------------------------
def _additions(
    known: List[Tuple[TopicSelection, OrganizedTopic]],
    all_topics: Sequence[OrganizedTopic],
    remaining: float,
    mode: CalibrationMode,
    policy: Policy,
) -> Dict[str, List[SpaceSuggestion]]:
    selected_ids = {sel.topic_id for sel, _ in known}
    candidates = [t for t in all_topics if t.id not in selected_ids]
    if isinstance(mode, ReferenceGuided):
        ranked = rank_topics(
            candidates, ("fits", "score"), remaining_space=remaining, reference=mode.reference
        )
    else:
        ranked = rank_topics(candidates, ("fits", "priority", "confidence"), remaining_space=remaining)

    add_topic: List[SpaceSuggestion] = []
    for topic in ranked[: policy.max_topic_additions]:
        space = space_of(topic)
        note = "" if space <= remaining else f" (needs {space - remaining:.0f} more units)"
        add_topic.append(
            SpaceSuggestion(
                type="add_topic",
                target_id=topic.id,
                description=(
                    f'Add "{topic.title}" ({priority_of(topic)} priority) '
                    f"to use the available space{note}"
                ),
                space_impact=space,
            )
        )

    add_subtopic: List[SpaceSuggestion] = []
    for sel, topic in known:
        unselected = [
            (idx, sub) for idx, sub in enumerate(topic.subtopics)
            if sub.id not in sel.subtopic_ids
        ]
        unselected.sort(
            key=lambda pair: (
                0 if space_of(pair[1]) <= remaining else 1,
                priority_rank(pair[1]),
                pair[0],
            )
        )
        for _, sub in unselected[: policy.max_subtopic_additions_per_topic]:
            add_subtopic.append(
                SpaceSuggestion(
                    type="add_subtopic",
                    target_id=sub.id,
                    description=f'Add subtopic "{sub.title}" to "{topic.title}"',
                    space_impact=space_of(sub),
                )
            )

    return {"add_topic": add_topic, "add_subtopic": add_subtopic}


def _expansions(
    known: List[Tuple[TopicSelection, OrganizedTopic]],
    remaining: float,
    policy: Policy,
) -> List[SpaceSuggestion]:
    impact = min(remaining * 0.3, policy.expansion_cap)
    return [
        SpaceSuggestion(
            type="expand_content",
            target_id=topic.id,
            description=f'Expand "{topic.title}" with more detail or examples',
            space_impact=impact,
        )
        for _, topic in known
    ]


def _reductions(
    known: List[Tuple[TopicSelection, OrganizedTopic]],
    overflow: float,
) -> List[SpaceSuggestion]:
    """
    Walk tiers low -> high; inside a tier first whole topics, then selected
    subtopics of topics not already slated for removal. Stop once the
    accumulated recovery covers the overflow.
    """
    out: List[SpaceSuggestion] = []
    recovered = 0.0
    removed_topics: set = set()

    by_tier = {tier: entries for tier, entries in priority_buckets([t for _, t in known])}
    charged = {topic.id: space_of(sel) for sel, topic in known}
    chosen_subs = {topic.id: sel.subtopic_ids for sel, topic in known}

    for tier in ("low", "medium", "high"):
        for topic in by_tier[tier]:
            if recovered >= overflow:
                return out
            space = charged[topic.id]
            if space <= 0.0:
                continue
            out.append(
                SpaceSuggestion(
                    type="reduce_content",
                    target_id=topic.id,
                    description=f'Remove {tier} priority topic "{topic.title}" to resolve overflow',
                    space_impact=-space,
                )
            )
            removed_topics.add(topic.id)
            recovered += space

        for _, topic in known:
            if topic.id in removed_topics:
                continue
            for sub_id in chosen_subs[topic.id]:
                sub = topic.subtopic(sub_id)
                if sub is None or priority_of(sub) != tier or space_of(sub) <= 0.0:
                    continue
                if recovered >= overflow:
                    return out
                out.append(
                    SpaceSuggestion(
                        type="reduce_content",
                        target_id=sub.id,
                        description=f'Remove subtopic "{sub.title}" from "{topic.title}"',
                        space_impact=-space_of(sub),
                    )
                )
                recovered += space_of(sub)
    return out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def generate_space_suggestions(
    selection: Sequence[TopicSelection],
    available_space: float,
    all_topics: Sequence[OrganizedTopic],
    reference: Optional[ReferenceFormatAnalysis] = None,
    policy: Optional[Policy] = None,
) -> List[SpaceSuggestion]:
    """
    Up to `policy.max_suggestions` suggestions for the given selection.

    Within a type group suggestions are ordered by |space_impact| (largest
    first, stable); groups follow add_topic, add_subtopic, expand_content,
    reduce_content, except that a hierarchical reference puts add_subtopic
    first.
    add_topic candidates are ranked by priority then confidence, or by the
    reference-aware topic_score when a reference is given; topics that fit
    the remaining space come first either way.
    """
    mode = calibration_for(reference)
    policy = policy or DEFAULT_POLICY

    used = total_used_space(selection)
    if available_space <= 0.0:
        if used <= 0.0:
            return []
        utilization = float("inf")
    else:
        utilization = used / available_space
    remaining = max(0.0, available_space - used)

    by_id = {t.id: t for t in all_topics}
    known = _split_known(selection, by_id)

    groups: Dict[str, List[SpaceSuggestion]] = {k: [] for k in _GROUP_ORDER}
    if utilization < policy.under_utilized:
        if remaining > policy.min_remaining_for_additions or utilization < policy.sparse_utilized:
            groups.update(_additions(known, all_topics, remaining, mode, policy))
    elif utilization < policy.expansion_upper:
        if remaining > policy.min_remaining_for_expansion:
            groups["expand_content"] = _expansions(known, remaining, policy)
    elif utilization > policy.over_utilized:
        groups["reduce_content"] = _reductions(known, used - max(0.0, available_space))

    if isinstance(mode, ReferenceGuided) and mode.reference.organization_style == "hierarchical":
        order = _HIERARCHICAL_GROUP_ORDER
    else:
        order = _GROUP_ORDER

    out: List[SpaceSuggestion] = []
    for kind in order:
        out.extend(sorted(groups[kind], key=lambda s: -abs(s.space_impact)))
    logger.debug(
        "Suggestions at utilization %.3f: %s",
        utilization, {k: len(v) for k, v in groups.items()},
    )
    return out[: policy.max_suggestions]


def detect_empty_space_and_suggest_content(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    available_space: float,
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> List[ContentExpansionSuggestion]:
    """
    Concrete ways to fill leftover room when the selection uses less than
    80% of the budget and more than 100 units remain:
      - new topics that fit (add_context), up to 3, by relevance
      - unselected subtopics of selected topics that fit (add_subtopics), up to 2 each
      - example images for selected topics without any (add_examples)
      - more detail on the first two selected topics (add_details) when > 200 remain
    """
    mode = calibration_for(reference)
    if available_space <= 0.0:
        return []
    used = total_used_space(selection)
    remaining = available_space - used
    if used / available_space >= _EMPTY_SPACE_UTILIZATION or remaining <= _EMPTY_SPACE_MIN_REMAINING:
        return []

    by_id = {t.id: t for t in all_topics}
    known = _split_known(selection, by_id)
    selected_titles = [topic.title for _, topic in known]
    selected_ids = {topic.id for _, topic in known}

    topic_adds: List[ContentExpansionSuggestion] = []
    fitting = [t for t in all_topics if t.id not in selected_ids and space_of(t) <= remaining]
    scored = sorted(
        ((topic_relevance(t, selected_titles), idx, t) for idx, t in enumerate(fitting)),
        key=lambda x: (-x[0], x[1]),
    )
    for relevance, _, topic in scored[:_MAX_NEW_TOPICS]:
        topic_adds.append(
            ContentExpansionSuggestion(
                topic_id=topic.id,
                expansion_type="add_context",
                suggested_content=f'Add topic "{topic.title}" ({priority_of(topic)} priority)',
                estimated_space=space_of(topic),
                relevance_score=min(1.0, relevance),
            )
        )

    sub_adds: List[ContentExpansionSuggestion] = []
    other_adds: List[ContentExpansionSuggestion] = []
    for sel, topic in known:
        fits = [
            sub for sub in topic.subtopics
            if sub.id not in sel.subtopic_ids and space_of(sub) <= remaining
        ]
        for sub in fits[:_MAX_SUBTOPICS_PER_TOPIC]:
            sub_adds.append(
                ContentExpansionSuggestion(
                    topic_id=topic.id,
                    subtopic_id=sub.id,
                    expansion_type="add_subtopics",
                    suggested_content=f'Add subtopic "{sub.title}" to "{topic.title}"',
                    estimated_space=space_of(sub),
                    relevance_score=min(1.0, subtopic_relevance(sub)),
                )
            )
        if not topic.examples and remaining >= EXAMPLE_SURCHARGE:
            other_adds.append(
                ContentExpansionSuggestion(
                    topic_id=topic.id,
                    expansion_type="add_examples",
                    suggested_content=f'Add a worked example to "{topic.title}"',
                    estimated_space=float(EXAMPLE_SURCHARGE),
                    relevance_score=_EXAMPLES_RELEVANCE,
                )
            )

    if remaining > _DETAILS_MIN_REMAINING:
        detail_space = min(remaining * _DETAILS_SHARE, _DETAILS_CAP)
        for _, topic in known[:2]:
            other_adds.append(
                ContentExpansionSuggestion(
                    topic_id=topic.id,
                    expansion_type="add_details",
                    suggested_content=f'Expand "{topic.title}" with more detailed explanations',
                    estimated_space=detail_space,
                    relevance_score=_DETAILS_RELEVANCE,
                )
            )

    if isinstance(mode, Default):
        pool = topic_adds + sub_adds + other_adds
        return sorted(pool, key=lambda s: -s.relevance_score)[:_MAX_EXPANSIONS]

    style = mode.reference.organization_style
    if style == "hierarchical":
        return (sub_adds + topic_adds + other_adds)[:_HIERARCHICAL_MAX_EXPANSIONS]
    if style == "flat":
        return (topic_adds + other_adds + sub_adds)[:_MAX_EXPANSIONS]
    pool = topic_adds + sub_adds + other_adds
    return sorted(pool, key=lambda s: -s.relevance_score)[:_MAX_EXPANSIONS]
