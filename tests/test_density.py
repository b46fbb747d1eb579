import pytest

from sheetpack.business_objects import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.planning import TopicSelection
from sheetpack.planning.density import optimize_content_density


def _used(space):
    return [TopicSelection("t", estimated_space=space)]


def _first(report):
    return report.optimization_actions[0].type


def test_unguided_target_and_alignment(a4_constraints):
    report = optimize_content_density(_used(2000), [], a4_constraints)
    assert report.target_density == pytest.approx(0.85)
    assert report.reference_alignment == 0.5
    assert report.current_density == pytest.approx(2000 / 11504)
    assert report.density_gap == pytest.approx(report.target_density - report.current_density)


def test_direction_follows_gap(a4_constraints):
    assert _first(optimize_content_density(_used(2000), [], a4_constraints)) == "increase_density"
    assert _first(optimize_content_density(_used(12000), [], a4_constraints)) == "decrease_density"
    assert _first(optimize_content_density(_used(9778), [], a4_constraints)) == "maintain_density"


def test_multi_column_adds_spacing_action():
    constraints = SpaceConstraints(available_pages=1, page_size="a4", font_size="medium", columns=2)
    report = optimize_content_density(_used(2000), [], constraints)
    areas = [a.target_area for a in report.optimization_actions]
    assert areas == ["topics", "subtopics", "spacing"]


def test_single_column_has_no_spacing_on_increase(a4_constraints):
    report = optimize_content_density(_used(2000), [], a4_constraints)
    assert "spacing" not in [a.target_area for a in report.optimization_actions]


def test_reference_moves_target(a4_constraints):
    dense = ReferenceFormatAnalysis(content_density=10000, topic_count=5, average_topic_length=100)
    sparse = ReferenceFormatAnalysis(content_density=5000, topic_count=5, average_topic_length=100)
    dense_target = optimize_content_density(_used(2000), [], a4_constraints, dense).target_density
    sparse_target = optimize_content_density(_used(2000), [], a4_constraints, sparse).target_density
    assert dense_target > sparse_target
    assert dense_target != pytest.approx(0.85)
    assert sparse_target != pytest.approx(0.85)
    assert 0.5 <= sparse_target <= 1.0


def test_reference_target_is_clamped(a4_constraints, hierarchical_reference):
    report = optimize_content_density(_used(2000), [], a4_constraints, hierarchical_reference)
    assert report.target_density == pytest.approx(0.5)


def test_empty_selection_with_reference(a4_constraints, hierarchical_reference):
    report = optimize_content_density([], [], a4_constraints, hierarchical_reference)
    assert report.current_density == 0.0
    assert 0.0 <= report.reference_alignment <= 1.0
    assert _first(report) == "increase_density"


def test_zero_pages_gives_zero_current_density():
    constraints = SpaceConstraints(available_pages=0)
    report = optimize_content_density(_used(500), [], constraints)
    assert report.current_density == 0.0
    assert report.density_gap == pytest.approx(0.85)
