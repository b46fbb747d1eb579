import pytest

from sheetpack.business_objects import ReferenceFormatAnalysis
from sheetpack.planning.solvers.greedy import (
    calculate_optimal_topic_count,
    optimize_space_utilization,
    selection_from_result,
)


def _subtopic_ids(result):
    return [sid for s in result.recommended_subtopics for sid in s.subtopic_ids]


# ----------------------------------------------------------------------------
# optimize_space_utilization
# ----------------------------------------------------------------------------

def test_high_priority_first_and_subtopic_included(tiered_topics):
    result = optimize_space_utilization(tiered_topics, 1000)
    assert result.recommended_topics == ["topic-1", "topic-2", "topic-3"]
    assert "sub-1" in _subtopic_ids(result)
    assert result.utilization_score == 1.0
    assert result.estimated_final_utilization == result.utilization_score


def test_tight_budget_allows_at_most_one_topic(tiered_topics):
    result = optimize_space_utilization(tiered_topics, 300)
    assert len(result.recommended_topics) <= 1
    # an oversized high topic does not block the medium tier
    assert result.recommended_topics == ["topic-2"]


def test_generous_budget_is_well_used(tiered_topics):
    result = optimize_space_utilization(tiered_topics, 1200)
    assert result.utilization_score > 0.7
    assert 0.0 <= result.utilization_score <= 1.0


def test_higher_tier_wins_over_input_order(make_topic):
    topics = [make_topic("low", 300, "low"), make_topic("high", 300, "high")]
    result = optimize_space_utilization(topics, 300)
    assert result.recommended_topics == ["high"]


def test_earlier_input_wins_ties(make_topic):
    topics = [make_topic("first", 300, "high"), make_topic("second", 300, "high")]
    assert optimize_space_utilization(topics, 300).recommended_topics == ["first"]


def test_selection_never_exceeds_budget(make_topic, make_subtopic):
    topics = [
        make_topic(
            f"t{i}", 90 + 37 * i, ("high", "medium", "low")[i % 3],
            subtopics=[make_subtopic(f"t{i}-s{j}", 15 + 11 * j, ("low", "high")[j % 2]) for j in range(3)],
        )
        for i in range(9)
    ]
    for budget in (0, 50, 333, 777, 1500, 5000):
        result = optimize_space_utilization(topics, budget)
        selection = selection_from_result(result, topics)
        used = sum(s.estimated_space for s in selection)
        assert used <= budget
        assert result.used_space == used


def test_non_positive_budget_gives_empty_result(tiered_topics):
    for budget in (0, -10):
        result = optimize_space_utilization(tiered_topics, budget)
        assert result.recommended_topics == []
        assert result.recommended_subtopics == []
        assert result.utilization_score == 0.0
        assert result.suggestions == []


def test_empty_pool(make_topic):
    result = optimize_space_utilization([], 1000)
    assert result.recommended_topics == []
    assert result.utilization_score == 0.0


def test_optimization_is_idempotent(tiered_topics):
    assert optimize_space_utilization(tiered_topics, 900) == optimize_space_utilization(tiered_topics, 900)


def test_reference_holds_back_lower_tiers(make_topic, hierarchical_reference):
    topics = [make_topic("high", 500, "high"), make_topic("medium", 450, "medium")]
    assert optimize_space_utilization(topics, 1000).recommended_topics == ["high", "medium"]
    guided = optimize_space_utilization(topics, 1000, reference=hierarchical_reference)
    assert guided.recommended_topics == ["high"]


def test_reference_never_holds_back_high_tier(make_topic, hierarchical_reference):
    topics = [make_topic("high", 1000, "high")]
    guided = optimize_space_utilization(topics, 1000, reference=hierarchical_reference)
    assert guided.recommended_topics == ["high"]


def test_result_carries_suggestions(tiered_topics):
    # 1000 / 1200 used -> expansion band with 200 units left
    result = optimize_space_utilization(tiered_topics, 1200)
    assert result.suggestions
    assert all(s.type == "expand_content" for s in result.suggestions)
    assert all(s.space_impact == pytest.approx(60) for s in result.suggestions)


# ----------------------------------------------------------------------------
# calculate_optimal_topic_count
# ----------------------------------------------------------------------------

def _count_topics(make_topic):
    return [
        make_topic("topic-1", 300, "high"),
        make_topic("topic-2", 280, "medium"),
        make_topic("topic-3", 200, "low"),
    ]


def test_optimal_count_greedy_prefix(make_topic):
    topics = _count_topics(make_topic)
    assert calculate_optimal_topic_count(1000, topics) == 3
    assert calculate_optimal_topic_count(10000, topics) == len(topics)
    assert calculate_optimal_topic_count(500, topics) == 1
    assert calculate_optimal_topic_count(200, topics) == 0


def test_optimal_count_with_reference(make_topic, hierarchical_reference):
    topics = _count_topics(make_topic)
    count = calculate_optimal_topic_count(1000, topics, hierarchical_reference)
    assert 2 <= count <= len(topics)
    # a very sparse reference still allows at least one topic
    sparse = ReferenceFormatAnalysis(content_density=100000, topic_count=1, average_topic_length=100)
    assert calculate_optimal_topic_count(1000, topics, sparse) == 1


def test_optimal_count_edge_cases(make_topic, hierarchical_reference):
    topics = _count_topics(make_topic)
    assert calculate_optimal_topic_count(0, topics) == 0
    assert calculate_optimal_topic_count(1000, []) == 0
    assert calculate_optimal_topic_count(0, topics, hierarchical_reference) == 0
    no_density = ReferenceFormatAnalysis(content_density=0, topic_count=5, average_topic_length=100)
    assert calculate_optimal_topic_count(600, topics, no_density) == 2


def test_optimal_count_with_reference_is_at_least_one(make_topic):
    topics = [make_topic("wide", 5000, "high")]
    no_density = ReferenceFormatAnalysis(content_density=0, topic_count=5, average_topic_length=100)
    assert calculate_optimal_topic_count(1000, topics) == 0
    assert calculate_optimal_topic_count(1000, topics, no_density) == 1


def test_nothing_fits_gives_zero_final_utilization(make_topic):
    result = optimize_space_utilization([make_topic("wide", 5000, "high")], 1000)
    assert result.recommended_topics == []
    assert result.utilization_score == 0.0
    assert result.estimated_final_utilization == 0.0
    assert result.available_space == 1000
    # the empty selection still gets an addition hint
    assert [s.type for s in result.suggestions] == ["add_topic"]
