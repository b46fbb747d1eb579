import pytest

from sheetpack.business_objects import (
    EnhancedSubTopic,
    OrganizedTopic,
    SpaceConstraints,
    StateValidationError,
    VisualExample,
)
from sheetpack.heuristics.estimate.footprint import (
    add_space_estimates,
    calculate_available_space,
    estimate_content_space,
    estimate_subtopic_space,
    estimate_topic_space,
    infer_priority,
)


def _space(**overrides) -> int:
    params = dict(available_pages=1, page_size="a4", font_size="medium", columns=1)
    params.update(overrides)
    return calculate_available_space(SpaceConstraints(**params))


# ----------------------------------------------------------------------------
# Available space
# ----------------------------------------------------------------------------

def test_a4_medium_single_page_budget(a4_constraints):
    space = calculate_available_space(a4_constraints)
    assert 10000 < space < 15000
    assert space == 11504


def test_page_size_monotonicity():
    assert _space(page_size="a3") > _space(page_size="legal") > _space(page_size="a4") > _space(page_size="letter")


def test_font_size_monotonicity():
    assert _space(font_size="small") > _space(font_size="medium") > _space(font_size="large")


def test_columns_strictly_decrease_space():
    assert _space(columns=1) > _space(columns=2) > _space(columns=3)


def test_available_space_is_idempotent(a4_constraints):
    assert calculate_available_space(a4_constraints) == calculate_available_space(a4_constraints)
    twin = SpaceConstraints(
        available_pages=1, page_size="a4", font_size="medium", columns=1, target_utilization=0.85
    )
    assert twin is not a4_constraints
    assert calculate_available_space(twin) == calculate_available_space(a4_constraints)


def test_pages_are_linear_up_to_flooring():
    one = _space(available_pages=1)
    for pages in (2, 3, 5):
        assert abs(_space(available_pages=pages) - pages * one) <= pages


@pytest.mark.parametrize("pages", [0, -1])
def test_non_positive_pages_give_no_space(pages):
    assert _space(available_pages=pages) == 0


@pytest.mark.parametrize(
    "overrides",
    [{"columns": 4}, {"columns": 0}, {"page_size": "b5"}, {"font_size": "tiny"}, {"target_utilization": 0.0}],
)
def test_invalid_constraints_raise(overrides):
    params = dict(available_pages=1, page_size="a4", font_size="medium", columns=1)
    params.update(overrides)
    with pytest.raises(StateValidationError):
        SpaceConstraints(**params)


# ----------------------------------------------------------------------------
# Footprints
# ----------------------------------------------------------------------------

def test_content_estimate_exceeds_raw_length(a4_constraints):
    for text in ("x", "a" * 100, "word " * 321):
        assert estimate_content_space(text, a4_constraints) > 1.2 * len(text)


def test_empty_content_costs_nothing(a4_constraints):
    assert estimate_content_space("", a4_constraints) == 0


@pytest.mark.parametrize("length", [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 100])
def test_multi_column_costs_more_for_same_text(a4_constraints, length):
    two_col = SpaceConstraints(available_pages=1, page_size="a4", font_size="medium", columns=2)
    text = "a" * length
    assert estimate_content_space(text, two_col) > estimate_content_space(text, a4_constraints)


def test_subtopic_estimate_adds_title_overhead(a4_constraints):
    sub = EnhancedSubTopic(id="s", title="S", content="a" * 8)
    assert estimate_subtopic_space(sub, a4_constraints) == 10 + 30


def test_topic_estimate_includes_subtopics(a4_constraints):
    sub = EnhancedSubTopic(id="s", title="S", content="a" * 8)
    topic = OrganizedTopic(id="t", title="T", content="a" * 40, subtopics=(sub,))
    assert estimate_topic_space(topic, a4_constraints) == 50 + 50 + 40


def test_example_surcharge(a4_constraints):
    plain = OrganizedTopic(id="t", title="T", content="Some body text")
    illustrated = OrganizedTopic(
        id="t",
        title="T",
        content="Some body text",
        examples=(VisualExample(id="e1"), VisualExample(id="e2")),
    )
    diff = estimate_topic_space(illustrated, a4_constraints) - estimate_topic_space(plain, a4_constraints)
    assert diff == 400


# ----------------------------------------------------------------------------
# Priority inference and estimate filling
# ----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "confidence,expected",
    [(0.95, "high"), (0.8, "high"), (0.79, "medium"), (0.5, "medium"), (0.49, "low"), (0.0, "low")],
)
def test_infer_priority_bands(confidence, expected):
    assert infer_priority(confidence) == expected


def test_add_space_estimates_returns_new_topics(a4_constraints):
    sub = EnhancedSubTopic(id="s", title="S", content="a" * 8, confidence=0.3)
    topic = OrganizedTopic(id="t", title="T", content="a" * 40, subtopics=(sub,), confidence=0.9)
    kept = OrganizedTopic(id="k", title="K", content="abc", confidence=0.9, priority="low")

    out = add_space_estimates([topic, kept], a4_constraints)

    assert topic.estimated_space is None
    assert out[0].estimated_space == 140
    assert out[0].priority == "high"
    assert out[0].subtopics[0].estimated_space == 40
    assert out[0].subtopics[0].priority == "low"
    assert out[0].subtopics[0].parent_topic_id == "t"
    assert out[1].priority == "low"
    assert out[0].estimated_space >= 50 + out[0].subtopics[0].estimated_space
