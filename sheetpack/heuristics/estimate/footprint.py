# -*- coding: utf-8 -*-
"""
Capacity & footprint estimation.

Converts physical layout parameters into a space budget and pieces of
content into footprints, both in the same abstract unit ("equivalent
characters"). Pure and stateless: no mutation, no I/O.

Budget model
------------
space = floor( W * H * pages * target_utilization
               * COLUMN_SPACING_FACTOR ** (columns - 1)
               * FONT_DENSITY[font] )

  W, H          page dimensions in inches (PAGE_DIMENSIONS)
  FONT_DENSITY  characters per square inch for the font size

Footprint model
---------------
base(text)    = ceil( len(text) * FORMATTING_OVERHEAD )
content(text) = base + (max(1, ceil(base * (MULTI_COLUMN_OVERHEAD - 1))) if columns > 1)
subtopic      = content(body) + SUBTOPIC_TITLE_OVERHEAD
topic         = content(body) + TOPIC_TITLE_OVERHEAD + sum(subtopic) + EXAMPLE_SURCHARGE * n_examples
"""

from __future__ import annotations
import math
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from sheetpack.business_objects.constraints import SpaceConstraints
from sheetpack.business_objects.topics import EnhancedSubTopic, OrganizedTopic

# Page dimensions in inches (width, height)
PAGE_DIMENSIONS: Dict[str, Tuple[float, float]] = {
    "a4": (8.27, 11.69),
    "letter": (8.5, 11.0),
    "legal": (8.5, 14.0),
    "a3": (11.69, 16.54),
}

# Characters per square inch
FONT_DENSITY: Dict[str, float] = {
    "small": 180.0,
    "medium": 140.0,
    "large": 100.0,
}

COLUMN_SPACING_FACTOR: float = 0.95   # each extra column loses 5% to gutters
FORMATTING_OVERHEAD: float = 1.25     # headers, bullets, spacing
MULTI_COLUMN_OVERHEAD: float = 1.10   # reflow across column breaks
TOPIC_TITLE_OVERHEAD: int = 50
SUBTOPIC_TITLE_OVERHEAD: int = 30
EXAMPLE_SURCHARGE: int = 200          # per attached image

# Confidence bands for priority inference
_HIGH_CONFIDENCE: float = 0.8
_MEDIUM_CONFIDENCE: float = 0.5


def page_capacity(constraints: SpaceConstraints) -> float:
    """Raw character capacity of a single page (no utilization target, no column loss)."""
    w, h = PAGE_DIMENSIONS[constraints.page_size]
    return w * h * FONT_DENSITY[constraints.font_size]


def calculate_available_space(constraints: SpaceConstraints) -> int:
    """
    Total space budget for the document.

    Monotone in page size and font size, strictly decreasing in columns,
    linear in pages (up to flooring). Non-positive page counts give 0.
    """
    pages = int(constraints.available_pages)
    if pages <= 0:
        return 0

    column_factor = COLUMN_SPACING_FACTOR ** (int(constraints.columns) - 1)
    space = (
        page_capacity(constraints)
        * pages
        * float(constraints.target_utilization)
        * column_factor
    )
    return int(math.floor(space))


def estimate_content_space(text: str, constraints: SpaceConstraints) -> int:
    if not text:
        return 0
    chars = int(math.ceil(len(text) * FORMATTING_OVERHEAD))
    if constraints.columns > 1:
        # reflow costs at least one unit
        surcharge = round(chars * (MULTI_COLUMN_OVERHEAD - 1.0), 6)
        chars += max(1, int(math.ceil(surcharge)))
    return chars


def estimate_subtopic_space(subtopic: EnhancedSubTopic, constraints: SpaceConstraints) -> int:
    return estimate_content_space(subtopic.content, constraints) + SUBTOPIC_TITLE_OVERHEAD


def estimate_topic_space(topic: OrganizedTopic, constraints: SpaceConstraints) -> int:
    """
    Footprint of a whole topic: body, title, every subtopic and a fixed
    surcharge per attached example (independent of text length).
    """
    total = estimate_content_space(topic.content, constraints)
    total += TOPIC_TITLE_OVERHEAD
    total += sum(estimate_subtopic_space(sub, constraints) for sub in topic.subtopics)
    total += len(topic.examples) * EXAMPLE_SURCHARGE
    return total


def infer_priority(confidence: float) -> str:
    c = float(confidence)
    if c >= _HIGH_CONFIDENCE:
        return "high"
    if c >= _MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def add_space_estimates(
    topics: Iterable[OrganizedTopic],
    constraints: SpaceConstraints,
) -> List[OrganizedTopic]:
    """
    Return new topics with estimated_space filled on every topic and subtopic.

    A missing priority is inferred from confidence. Existing priorities are
    kept; existing estimates are recomputed for the given constraints.
    """
    out: List[OrganizedTopic] = []
    for topic in topics:
        subs = tuple(
            replace(
                sub,
                estimated_space=estimate_subtopic_space(sub, constraints),
                priority=sub.priority or infer_priority(sub.confidence),
                parent_topic_id=sub.parent_topic_id or topic.id,
            )
            for sub in topic.subtopics
        )
        estimated = replace(topic, subtopics=subs)
        out.append(
            replace(
                estimated,
                estimated_space=estimate_topic_space(estimated, constraints),
                priority=topic.priority or infer_priority(topic.confidence),
            )
        )
    return out
