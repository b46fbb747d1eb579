# -*- coding: utf-8 -*-
"""
Derived topic features used by ordering and suggestion schemes.

This module computes per-topic scores from priority, confidence, size and
richness. It is intentionally pure/stateless and performs no mutation or I/O.
The weights are tunable constants; callers rely only on their direction
(higher priority / confidence / richness scores higher).
"""

from __future__ import annotations
from difflib import SequenceMatcher
from typing import Dict, Iterable, Optional

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis
from sheetpack.business_objects.topics import (
    EnhancedSubTopic,
    OrganizedTopic,
    priority_of,
)

# Tier rank: lower sorts first
PRIORITY_RANK: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}

# Tier value on a 0..1 scale
PRIORITY_SCORE: Dict[str, float] = {"high": 1.0, "medium": 0.7, "low": 0.4}


def priority_rank(obj) -> int:
    return PRIORITY_RANK[priority_of(obj)]


def priority_score(obj) -> float:
    return PRIORITY_SCORE[priority_of(obj)]


def topic_score(
    topic: OrganizedTopic,
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> float:
    """
    Comprehensive value score:
      0.4 * priority + 0.25 * confidence + richness (subtopics, examples)
      + 0.15 * length alignment with the reference (if any)
    """
    subtopic_part = min(0.2, len(topic.subtopics) * 0.05)
    example_part = min(0.1, len(topic.examples) * 0.03)

    reference_part = 0.0
    if reference is not None:
        length = len(topic.content)
        ideal = float(reference.average_topic_length)
        longest = max(length, ideal)
        if longest > 0:
            reference_part = (1.0 - abs(length - ideal) / longest) * 0.15

    return (
        priority_score(topic) * 0.4
        + float(topic.confidence) * 0.25
        + subtopic_part
        + example_part
        + reference_part
    )


def title_similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio in [0, 1]; two empty titles are identical."""
    a, b = a.lower(), b.lower()
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a, b).ratio()


def topic_relevance(topic: OrganizedTopic, selected_titles: Iterable[str]) -> float:
    """
    Value of adding an unselected topic given what is already selected.

    0.4 * priority + 0.3 * confidence + richness (<= 0.3)
    + 0.2 * complementarity (1 - max title similarity to a selected topic)
    """
    richness = min(0.3, len(topic.subtopics) * 0.1 + len(topic.examples) * 0.05)
    closest = max((title_similarity(topic.title, t) for t in selected_titles), default=0.0)
    return (
        priority_score(topic) * 0.4
        + float(topic.confidence) * 0.3
        + richness
        + (1.0 - closest) * 0.2
    )


def subtopic_relevance(subtopic: EnhancedSubTopic) -> float:
    """0.5 * priority + 0.3 * confidence + length bonus (<= 0.2)."""
    length_part = min(0.2, len(subtopic.content) / 500.0)
    return priority_score(subtopic) * 0.5 + float(subtopic.confidence) * 0.3 + length_part


def condensation_potential(topic: Optional[OrganizedTopic]) -> float:
    """
    Fraction of a topic's space that could be recovered by condensing it.

    Long bodies, many subtopics, low confidence and lower priority each add
    potential; capped at 0.8. Unknown topics have none.
    """
    if topic is None:
        return 0.0
    potential = 0.0
    if len(topic.content) > 500:
        potential += 0.3
    if len(topic.subtopics) > 3:
        potential += 0.2
    if topic.confidence < 0.7:
        potential += 0.2
    p = priority_of(topic)
    if p == "low":
        potential += 0.3
    elif p == "medium":
        potential += 0.1
    return min(potential, 0.8)
