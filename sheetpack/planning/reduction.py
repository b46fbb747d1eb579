# -*- coding: utf-8 -*-
"""
Reduction strategies for an overflowing selection.

Construction order:
  1) Whole low-priority topics, lowest confidence first. If they cover the
     overflow, that single strategy is returned (minimal impact, 0.9).
  2) Otherwise every fallback starts from removing all low-priority topics
     and adds one more lever:
       - remove_subtopics  low, then medium, subtopics of retained topics
       - trim_content      condense retained non-high topics
       - remove_topics     extend removal into medium-priority topics
Strategies are returned best-first by preservation_score.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.heuristics.select_next.features import condensation_potential
from sheetpack.planning.solution import ReductionStrategy, TopicSelection

logger = logging.getLogger(__name__)

# (preservation_score, content_impact) per lever
_REMOVE_LOW_TOPICS = (0.9, "minimal")
_REMOVE_LOW_SUBTOPICS = (0.85, "minimal")
_REMOVE_MEDIUM_SUBTOPICS = (0.8, "moderate")
_TRIM_CONTENT = (0.75, "moderate")
_REMOVE_MEDIUM_TOPICS = (0.6, "significant")

_MIN_CONDENSATION: float = 0.2

_Entry = Tuple[int, TopicSelection, OrganizedTopic, str]


def _tier(sel: TopicSelection, topic: OrganizedTopic) -> str:
    if topic.priority is not None:
        return priority_of(topic)
    return priority_of(sel)


def _cheapest_cover(entries: List[_Entry], need: float) -> Tuple[List[_Entry], float]:
    """Take entries (lowest confidence first, then input order) until `need` is met."""
    ordered = sorted(entries, key=lambda e: (float(e[2].confidence), e[0]))
    taken: List[_Entry] = []
    recovered = 0.0
    for e in ordered:
        if recovered >= need:
            break
        taken.append(e)
        recovered += space_of(e[1])
    return taken, recovered


def _subtopic_lever(
    retained: List[_Entry],
    base_ids: List[str],
    base_space: float,
    overflow: float,
) -> Optional[ReductionStrategy]:
    targets: List[str] = []
    recovered = base_space
    used_medium = False
    for tier in ("low", "medium"):
        for _, sel, topic, _ in retained:
            for sid in sel.subtopic_ids:
                sub = topic.subtopic(sid)
                if sub is None or priority_of(sub) != tier:
                    continue
                if recovered >= overflow:
                    break
                targets.append(sub.id)
                recovered += space_of(sub)
                used_medium = used_medium or tier == "medium"
    if not targets:
        return None
    score, impact = _REMOVE_MEDIUM_SUBTOPICS if used_medium else _REMOVE_LOW_SUBTOPICS
    return ReductionStrategy(
        reduction_type="remove_subtopics",
        target_ids=base_ids + targets,
        space_recovered=recovered,
        content_impact=impact,
        preservation_score=score,
    )


def _trim_lever(
    retained: List[_Entry],
    base_ids: List[str],
    base_space: float,
) -> Optional[ReductionStrategy]:
    scored = [
        (condensation_potential(topic), idx, sel)
        for idx, sel, topic, tier in retained
        if tier != "high"
    ]
    scored = [s for s in scored if s[0] > _MIN_CONDENSATION]
    if not scored:
        return None
    scored.sort(key=lambda s: (-s[0], s[1]))
    score, impact = _TRIM_CONTENT
    return ReductionStrategy(
        reduction_type="trim_content",
        target_ids=base_ids + [sel.topic_id for _, _, sel in scored],
        space_recovered=base_space + sum(space_of(sel) * p for p, _, sel in scored),
        content_impact=impact,
        preservation_score=score,
    )


def _medium_topic_lever(
    retained: List[_Entry],
    base_ids: List[str],
    base_space: float,
    overflow: float,
) -> Optional[ReductionStrategy]:
    medium = [e for e in retained if e[3] == "medium"]
    taken, recovered = _cheapest_cover(medium, overflow - base_space)
    if not taken:
        return None
    score, impact = _REMOVE_MEDIUM_TOPICS
    return ReductionStrategy(
        reduction_type="remove_topics",
        target_ids=base_ids + [e[1].topic_id for e in taken],
        space_recovered=base_space + recovered,
        content_impact=impact,
        preservation_score=score,
    )


def create_content_reduction_strategy(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    overflow_amount: float,
) -> List[ReductionStrategy]:
    """
    Candidate plans to recover `overflow_amount` units, best-first.

    Returns [] when there is no overflow. A strategy that removes only
    low-priority topics always reports preservation 0.9 and minimal impact.
    """
    if overflow_amount <= 0.0:
        return []

    by_id: Dict[str, OrganizedTopic] = {t.id: t for t in all_topics}
    entries: List[_Entry] = []
    for idx, sel in enumerate(selection):
        topic = by_id.get(sel.topic_id)
        if topic is None:
            logger.warning(
                "Selection references unknown topic id '%s'; not a reduction target", sel.topic_id
            )
            continue
        entries.append((idx, sel, topic, _tier(sel, topic)))

    low = [e for e in entries if e[3] == "low"]
    low_space = sum(space_of(e[1]) for e in low)

    if low and low_space >= overflow_amount:
        taken, recovered = _cheapest_cover(low, overflow_amount)
        score, impact = _REMOVE_LOW_TOPICS
        logger.debug("Overflow %.0f covered by %d low-priority topics", overflow_amount, len(taken))
        return [
            ReductionStrategy(
                reduction_type="remove_topics",
                target_ids=[e[1].topic_id for e in taken],
                space_recovered=recovered,
                content_impact=impact,
                preservation_score=score,
            )
        ]

    base_ids = [e[1].topic_id for e in low]
    retained = [e for e in entries if e[3] != "low"]
    strategies = [
        s for s in (
            _subtopic_lever(retained, base_ids, low_space, overflow_amount),
            _trim_lever(retained, base_ids, low_space),
            _medium_topic_lever(retained, base_ids, low_space, overflow_amount),
        )
        if s is not None
    ]
    if not strategies and low:
        score, impact = _REMOVE_LOW_TOPICS
        strategies.append(
            ReductionStrategy(
                reduction_type="remove_topics",
                target_ids=base_ids,
                space_recovered=low_space,
                content_impact=impact,
                preservation_score=score,
            )
        )

    strategies.sort(key=lambda s: -s.preservation_score)
    logger.debug(
        "Overflow %.0f: low topics recover %.0f; %d fallback strategies",
        overflow_amount, low_space, len(strategies),
    )
    return strategies
