import json
import os

import pytest

from sheetpack.business_objects import SchemaError, StateValidationError
from sheetpack.utils.read_jsons import (
    read_constraints_json,
    read_reference_json,
    read_selection_json,
    read_topics_json,
)

PROBLEM_DIR = os.path.join(os.path.dirname(__file__), "..", "problems", "problem_1")


def _write(tmp_path, name, payload):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


# ----------------------------------------------------------------------------
# topics.json
# ----------------------------------------------------------------------------

def test_minimal_topic_gets_defaults(tmp_path):
    path = _write(tmp_path, "topics.json", [{"id": "a", "title": "A"}])
    (topic,) = read_topics_json(path)
    assert topic.content == ""
    assert topic.confidence == 0.5
    assert topic.priority is None
    assert topic.estimated_space is None
    assert topic.subtopics == ()


def test_subtopics_point_back_at_their_topic(tmp_path):
    path = _write(tmp_path, "topics.json", [{
        "id": "a", "title": "A", "estimated_space": 120,
        "examples": [{"id": "img"}],
        "subtopics": [{"id": "a1", "title": "A1", "priority": "low"}],
    }])
    (topic,) = read_topics_json(path)
    assert topic.estimated_space == 120.0
    assert topic.examples[0].id == "img"
    assert topic.subtopics[0].parent_topic_id == "a"
    assert topic.subtopics[0].priority == "low"


def test_missing_title_is_a_schema_error(tmp_path):
    path = _write(tmp_path, "topics.json", [{"id": "a"}])
    with pytest.raises(SchemaError, match="title"):
        read_topics_json(path)


def test_topics_must_be_an_array(tmp_path):
    path = _write(tmp_path, "topics.json", {"id": "a", "title": "A"})
    with pytest.raises(SchemaError):
        read_topics_json(path)


def test_invalid_topic_values_are_chained(tmp_path):
    path = _write(tmp_path, "topics.json", [{"id": "a", "title": "A", "confidence": 2}])
    with pytest.raises(SchemaError) as excinfo:
        read_topics_json(path)
    assert isinstance(excinfo.value.__cause__, StateValidationError)


def test_unreadable_files_are_chained(tmp_path):
    with pytest.raises(SchemaError) as excinfo:
        read_topics_json(str(tmp_path / "missing.json"))
    assert isinstance(excinfo.value.__cause__, OSError)

    path = _write(tmp_path, "broken.json", "[{")
    with pytest.raises(SchemaError) as excinfo:
        read_topics_json(path)
    assert isinstance(excinfo.value.__cause__, ValueError)


# ----------------------------------------------------------------------------
# constraints.json / reference.json / selection.json
# ----------------------------------------------------------------------------

def test_constraints(tmp_path):
    path = _write(tmp_path, "constraints.json", {
        "available_pages": 2, "page_size": "letter", "font_size": "small", "columns": 3,
    })
    constraints = read_constraints_json(path)
    assert constraints.available_pages == 2
    assert constraints.columns == 3
    assert constraints.target_utilization == 0.85


@pytest.mark.parametrize(
    "payload",
    [
        {"available_pages": 1, "page_size": "a4", "font_size": "medium"},
        {"available_pages": 1, "page_size": "b5", "font_size": "medium", "columns": 1},
        {"available_pages": 1, "page_size": "a4", "font_size": "medium", "columns": 4},
    ],
)
def test_bad_constraints(tmp_path, payload):
    path = _write(tmp_path, "constraints.json", payload)
    with pytest.raises(SchemaError):
        read_constraints_json(path)


def test_reference_defaults(tmp_path):
    path = _write(tmp_path, "reference.json", {
        "content_density": 3000, "topic_count": 4, "average_topic_length": 250,
    })
    reference = read_reference_json(path)
    assert reference.layout_pattern == "single-column"
    assert reference.organization_style == "mixed"
    assert reference.visual_elements == {}


def test_selection_dedupes_subtopics(tmp_path):
    path = _write(tmp_path, "selection.json", [
        {"topic_id": "a", "subtopic_ids": ["x", "y", "x"], "estimated_space": 300},
        {"topic_id": "b"},
    ])
    first, second = read_selection_json(path)
    assert first.subtopic_ids == ("x", "y")
    assert first.estimated_space == 300.0
    assert second.estimated_space is None


def test_selection_requires_topic_id(tmp_path):
    path = _write(tmp_path, "selection.json", [{"subtopic_ids": []}])
    with pytest.raises(SchemaError, match="topic_id"):
        read_selection_json(path)


# ----------------------------------------------------------------------------
# Shipped problem
# ----------------------------------------------------------------------------

def test_shipped_problem_loads():
    topics = read_topics_json(os.path.join(PROBLEM_DIR, "topics.json"))
    constraints = read_constraints_json(os.path.join(PROBLEM_DIR, "constraints.json"))
    reference = read_reference_json(os.path.join(PROBLEM_DIR, "reference.json"))
    selection = read_selection_json(os.path.join(PROBLEM_DIR, "selection.json"))

    assert [t.id for t in topics][:2] == ["derivatives", "integrals"]
    assert constraints.columns == 2
    assert reference.organization_style == "hierarchical"
    known = {t.id for t in topics}
    assert all(s.topic_id in known for s in selection)
