"""Shared test fixtures for the sheetpack test suite."""

from typing import Optional, Sequence

import pytest

from sheetpack.business_objects import (
    EnhancedSubTopic,
    OrganizedTopic,
    ReferenceFormatAnalysis,
    SpaceConstraints,
)
from sheetpack.planning import TopicSelection


def _make_subtopic(
    sid: str,
    space: Optional[float],
    priority: Optional[str] = "medium",
    confidence: float = 0.8,
    content: str = "",
) -> EnhancedSubTopic:
    return EnhancedSubTopic(
        id=sid,
        title=sid.replace("-", " ").title(),
        content=content,
        confidence=confidence,
        priority=priority,
        estimated_space=space,
    )


def _make_topic(
    tid: str,
    space: Optional[float],
    priority: Optional[str] = "medium",
    confidence: float = 0.8,
    subtopics: Sequence[EnhancedSubTopic] = (),
    title: Optional[str] = None,
    content: str = "",
) -> OrganizedTopic:
    return OrganizedTopic(
        id=tid,
        title=title or tid.replace("-", " ").title(),
        content=content,
        subtopics=tuple(subtopics),
        confidence=confidence,
        priority=priority,
        estimated_space=space,
    )


def _select(topic: OrganizedTopic, *subtopic_ids: str, space: Optional[float] = None) -> TopicSelection:
    return TopicSelection(
        topic_id=topic.id,
        subtopic_ids=tuple(subtopic_ids),
        priority=topic.priority,
        estimated_space=topic.estimated_space if space is None else space,
    )


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_topic():
    return _make_topic


@pytest.fixture
def make_subtopic():
    return _make_subtopic


@pytest.fixture
def select():
    """Build a TopicSelection charging the topic's estimated space (or `space`)."""
    return _select


# ============================================================================
# Standard pools and constraints
# ============================================================================

@pytest.fixture
def tiered_topics():
    """400 high (+100 high subtopic), 300 medium, 200 low."""
    return [
        _make_topic(
            "topic-1", 400, "high", 0.9,
            subtopics=[_make_subtopic("sub-1", 100, "high")],
        ),
        _make_topic("topic-2", 300, "medium", 0.8),
        _make_topic("topic-3", 200, "low", 0.7),
    ]


@pytest.fixture
def a4_constraints():
    """A4 / medium / single column / 1 page / 0.85 -> 11504 units."""
    return SpaceConstraints(
        available_pages=1,
        page_size="a4",
        font_size="medium",
        columns=1,
        target_utilization=0.85,
    )


@pytest.fixture
def hierarchical_reference():
    return ReferenceFormatAnalysis(
        content_density=500,
        topic_count=5,
        average_topic_length=100,
        layout_pattern="single-column",
        organization_style="hierarchical",
    )
