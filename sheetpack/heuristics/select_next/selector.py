# -*- coding: utf-8 -*-
"""
Select Next: deterministic topic/subtopic ordering.

Two entry points:

  priority_buckets(entries)
      Split entries into ("high", [...]), ("medium", [...]), ("low", [...]),
      each bucket keeping input order. Solvers walk the buckets as three
      sequential passes, so a lower tier is never visited before a higher one.

  rank_topics(topics, order, remaining_space=...)
      Sort topics by an `order` list defining priority left->right.

Direction rules (fixed):
  - priority     -> high first
  - confidence   -> descending (higher first)
  - fits         -> topics whose estimated space fits `remaining_space` first
  - score        -> descending topic_score (reference-aware when given)
  - index        -> ascending input position (always the final tiebreaker)

We always append 'index' at the end if missing.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple, TypeVar

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis
from sheetpack.business_objects.topics import (
    OrganizedTopic,
    PRIORITY_LEVELS,
    priority_of,
    space_of,
)
from .features import PRIORITY_RANK, topic_score

T = TypeVar("T")

_DEFAULT_ORDER: Tuple[str, ...] = ("priority", "confidence")

_ALLOWED_KEYS = {
    "priority", "confidence", "fits", "score", "index",
}


def priority_buckets(entries: Sequence[T]) -> List[Tuple[str, List[T]]]:
    """
    Group entries by effective priority, preserving input order inside each tier.
    Entries without a priority land in "medium".
    """
    buckets: Dict[str, List[T]] = {p: [] for p in PRIORITY_LEVELS}
    for e in entries:
        buckets[priority_of(e)].append(e)
    return [(p, buckets[p]) for p in PRIORITY_LEVELS]


def _normalize_order(order: Sequence[str] | None) -> list[str]:
    """
    Normalize the user-provided order:
      - Default to ["priority", "confidence"] if None/empty
      - Keep first occurrence only (deduplicate while preserving order)
      - Validate keys against the allowed set
      - Ensure 'index' is present as the final key
    """
    if not order:
        norm = list(_DEFAULT_ORDER)
    else:
        seen: set[str] = set()
        norm = []
        for raw in order:
            key = str(raw).strip()
            if key not in _ALLOWED_KEYS:
                raise ValueError(
                    f"Unknown order key '{key}'. "
                    f"Allowed: {sorted(_ALLOWED_KEYS)}"
                )
            if key not in seen:
                seen.add(key)
                norm.append(key)

    if "index" not in norm:
        norm.append("index")
    return norm


def _sort_key_for_topic(
    index: int,
    topic: OrganizedTopic,
    order_keys: list[str],
    *,
    remaining_space: float,
    reference: Optional[ReferenceFormatAnalysis],
) -> Tuple:
    """
    Build a Python sort key tuple following the direction rules.
    Python sorts ascending; "descending" keys are negated.
    """
    key: list = []
    for k in order_keys:
        if k == "index":
            key.append(index)
        elif k == "priority":
            key.append(PRIORITY_RANK[priority_of(topic)])
        elif k == "confidence":
            key.append(-float(topic.confidence))
        elif k == "fits":
            key.append(0 if space_of(topic) <= remaining_space else 1)
        elif k == "score":
            key.append(-topic_score(topic, reference))
        else:
            raise AssertionError(f"Unhandled order key: {k}")
    return tuple(key)


def rank_topics(
    topics: Sequence[OrganizedTopic],
    order: Sequence[str] | None = None,
    *,
    remaining_space: float = float("inf"),
    reference: Optional[ReferenceFormatAnalysis] = None,
) -> List[OrganizedTopic]:
    """
    Return topics sorted according to `order`.

    Examples:
      ["priority", "confidence"]        # default
      ["fits", "priority", "confidence"]
      ["fits", "score"]                 # reference-guided additions

    Sorting is deterministic; input position is always the final tiebreaker.
    """
    order_keys = _normalize_order(order)
    sortable = [
        (
            _sort_key_for_topic(
                idx, t, order_keys, remaining_space=remaining_space, reference=reference
            ),
            t,
        )
        for idx, t in enumerate(topics)
    ]
    sortable.sort(key=lambda pair: pair[0])
    return [t for _, t in sortable]
