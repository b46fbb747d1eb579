# -*- coding: utf-8 -*-
"""
quality_metrics/core.py

Pure helpers to compute utilization KPIs for a topic selection.
- No side effects
- No external dependencies
- Works off TopicSelection lists, the topic pool and a space budget

Public API:
  - total_used_space(selection) -> float
  - utilization_fraction(used, available) -> float
  - remaining_space(used, available) -> float
  - compute_selection_metrics(selection, all_topics, available) -> Dict[str, float]
  - compute_reference_alignment(selection, all_topics, reference) -> float
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Sequence

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis
from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.planning.solution import TopicSelection

# Weights of the three alignment factors (sum to 1)
_ALIGN_COUNT_W: float = 0.3
_ALIGN_LENGTH_W: float = 0.3
_ALIGN_ORG_W: float = 0.4


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, float(x)))


def _ratio_agreement(actual: float, expected: float) -> float:
    """1 when actual == expected, falling linearly to 0 at 0x or 2x the expectation."""
    if expected <= 0.0:
        return 1.0 if actual <= 0.0 else 0.0
    return _clamp01(1.0 - abs(1.0 - actual / expected))


# ---------------------------------------------------------------------------
# 1) Budget arithmetic
# ---------------------------------------------------------------------------
def total_used_space(selection: Iterable[TopicSelection]) -> float:
    """Sum of estimated_space over the selection; missing estimates count as 0."""
    return float(sum(space_of(sel) for sel in selection))


def utilization_fraction(used: float, available: float) -> float:
    """used / available when available > 0, else 0. Not clamped: > 1.0 means overflow."""
    if available <= 0.0:
        return 0.0
    return float(used) / float(available)


def remaining_space(used: float, available: float) -> float:
    """Never negative."""
    return max(0.0, float(available) - float(used))


# ---------------------------------------------------------------------------
# 2) Selection KPIs
# ---------------------------------------------------------------------------
def compute_selection_metrics(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    available: float,
) -> Dict[str, float]:
    """
    Returns:
      {
        "Used Space": ...,
        "Remaining Space": ...,
        "Utilization": ...,          # fraction, may exceed 1.0
        "Selected Topics": ...,
        "Selected Subtopics": ...,
        "Total Topics": ...,
        "Selection Rate": ...,       # percent (0..100)
        "High Priority Coverage": ...,  # percent of high topics selected (100 if none exist)
        "Unknown Selections": ...,   # selections whose topic id is not in the pool
      }
    """
    by_id = {t.id: t for t in all_topics}
    used = total_used_space(selection)
    selected_ids = {sel.topic_id for sel in selection}
    known = [sel for sel in selection if sel.topic_id in by_id]

    high_ids = [t.id for t in all_topics if priority_of(t) == "high"]
    if high_ids:
        coverage = 100.0 * sum(1 for tid in high_ids if tid in selected_ids) / len(high_ids)
    else:
        coverage = 100.0

    total = len(all_topics)
    return {
        "Used Space": float(used),
        "Remaining Space": remaining_space(used, available),
        "Utilization": utilization_fraction(used, available),
        "Selected Topics": float(len(known)),
        "Selected Subtopics": float(sum(len(sel.subtopic_ids) for sel in known)),
        "Total Topics": float(total),
        "Selection Rate": 0.0 if total == 0 else 100.0 * len(known) / total,
        "High Priority Coverage": float(coverage),
        "Unknown Selections": float(len(selection) - len(known)),
    }


# ---------------------------------------------------------------------------
# 3) Reference alignment
# ---------------------------------------------------------------------------
def compute_reference_alignment(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
    reference: ReferenceFormatAnalysis,
) -> float:
    """
    How closely a selection matches a reference document, in [0, 1].

      0.3 * topic-count agreement
    + 0.3 * average body length agreement
    + 0.4 * organization agreement
            hierarchical -> share of selected topics with subtopics
            flat         -> share without subtopics
            mixed        -> 0.5

    An empty selection aligns only through organization (neutral 0.5 for mixed).
    """
    by_id = {t.id: t for t in all_topics}
    topics: List[OrganizedTopic] = [by_id[s.topic_id] for s in selection if s.topic_id in by_id]

    count_part = _ratio_agreement(len(topics), float(reference.topic_count))

    if topics:
        avg_len = sum(len(t.content) for t in topics) / len(topics)
        length_part = _ratio_agreement(avg_len, float(reference.average_topic_length))
        hierarchical_share = sum(1 for t in topics if t.subtopics) / len(topics)
    else:
        length_part = 0.0
        hierarchical_share = 0.0

    style = reference.organization_style
    if style == "hierarchical":
        org_part = hierarchical_share if topics else 0.0
    elif style == "flat":
        org_part = (1.0 - hierarchical_share) if topics else 0.0
    else:
        org_part = 0.5

    score = count_part * _ALIGN_COUNT_W + length_part * _ALIGN_LENGTH_W + org_part * _ALIGN_ORG_W
    return _clamp01(score)


def space_by_priority(
    selection: Sequence[TopicSelection],
    all_topics: Sequence[OrganizedTopic],
) -> Dict[str, float]:
    """Charged space per priority tier (topic priority, falling back to the selection's)."""
    by_id = {t.id: t for t in all_topics}
    out: Dict[str, float] = {"high": 0.0, "medium": 0.0, "low": 0.0}
    for sel in selection:
        topic = by_id.get(sel.topic_id)
        tier = priority_of(topic) if topic is not None and topic.priority else priority_of(sel)
        out[tier] += space_of(sel)
    return out
