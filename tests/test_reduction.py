import pytest

from sheetpack.planning.reduction import create_content_reduction_strategy


@pytest.fixture
def low_heavy(make_topic):
    return [
        make_topic("core", 500, "high", 0.9),
        make_topic("aside", 300, "low", 0.6),
        make_topic("trivia", 200, "low", 0.3),
    ]


def test_no_overflow_no_strategy(low_heavy, select):
    selection = [select(t) for t in low_heavy]
    assert create_content_reduction_strategy(selection, low_heavy, 0) == []
    assert create_content_reduction_strategy(selection, low_heavy, -50) == []


def test_low_topics_cover_overflow(low_heavy, select):
    selection = [select(t) for t in low_heavy]
    strategies = create_content_reduction_strategy(selection, low_heavy, 150)
    assert len(strategies) == 1
    best = strategies[0]
    assert best.reduction_type == "remove_topics"
    assert best.target_ids == ["trivia"]
    assert best.preservation_score > 0.8
    assert best.content_impact == "minimal"
    assert best.space_recovered >= 150


def test_lowest_confidence_removed_first(low_heavy, select):
    selection = [select(t) for t in low_heavy]
    best = create_content_reduction_strategy(selection, low_heavy, 400)[0]
    assert best.target_ids == ["trivia", "aside"]
    assert best.space_recovered == 500
    assert "core" not in best.target_ids


@pytest.fixture
def mixed_pool(make_topic, make_subtopic):
    return [
        make_topic(
            "core", 600, "high", 0.9,
            subtopics=[make_subtopic("core-low", 100, "low"), make_subtopic("core-med", 150, "medium")],
        ),
        make_topic("detail", 400, "medium", 0.9, content="x" * 600),
        make_topic("aside", 200, "low", 0.5),
    ]


def test_fallbacks_when_low_topics_are_not_enough(mixed_pool, select):
    core, detail, aside = mixed_pool
    selection = [
        select(core, "core-low", "core-med", space=850),
        select(detail),
        select(aside),
    ]
    strategies = create_content_reduction_strategy(selection, mixed_pool, 1000)

    assert [s.reduction_type for s in strategies] == ["remove_subtopics", "trim_content", "remove_topics"]
    scores = [s.preservation_score for s in strategies]
    assert scores == sorted(scores, reverse=True)
    assert all(0.0 <= s <= 1.0 for s in scores)
    # every fallback starts from dropping all low-priority topics
    assert all("aside" in s.target_ids for s in strategies)
    assert all("core" not in s.target_ids for s in strategies)

    subtopics, trim, medium = strategies
    assert subtopics.target_ids == ["aside", "core-low", "core-med"]
    assert trim.target_ids == ["aside", "detail"]
    assert trim.space_recovered == pytest.approx(200 + 400 * 0.4)
    assert medium.target_ids == ["aside", "detail"]
    assert medium.content_impact == "significant"


def test_unknown_selection_does_not_crash(make_topic, select):
    topics = [make_topic("known", 300, "low", 0.5)]
    ghost = select(make_topic("ghost", 500, "low", 0.9))
    strategies = create_content_reduction_strategy([ghost, select(topics[0])], topics, 200)
    assert strategies[0].reduction_type == "remove_topics"
    assert strategies[0].target_ids == ["known"]
