# -*- coding: utf-8 -*-
"""
I/O helpers for loading packing problem definitions.

This module includes lightweight JSON readers that match the
`problems/<name>/{topics.json, constraints.json, reference.json, selection.json}`
structure (reference.json and selection.json are optional).

JSON formats:
- topics.json      : [{"id", "title", "content", "confidence", "priority"?,
                       "estimated_space"?, "source_files"?, "examples"?: [{"id", "context"?}],
                       "subtopics"?: [{"id", "title", "content", "confidence",
                                       "priority"?, "estimated_space"?}]}, ...]
- constraints.json : {"available_pages", "page_size", "font_size", "columns",
                      "target_utilization"?}
- reference.json   : {"content_density", "topic_count", "average_topic_length",
                      "layout_pattern"?, "organization_style"?, "visual_elements"?}
- selection.json   : [{"topic_id", "subtopic_ids"?, "priority"?, "estimated_space"?}, ...]

These map directly to:
- business_objects.topics.OrganizedTopic / EnhancedSubTopic / VisualExample
- business_objects.constraints.SpaceConstraints / ReferenceFormatAnalysis
- planning.solution.TopicSelection
"""

from __future__ import annotations
import json
from typing import Any, List, Optional

from sheetpack.business_objects.constraints import ReferenceFormatAnalysis, SpaceConstraints
from sheetpack.business_objects.errors import SchemaError
from sheetpack.business_objects.topics import EnhancedSubTopic, OrganizedTopic, VisualExample
from sheetpack.planning.solution import TopicSelection


def _require(obj: dict, key: str, path: str) -> object:
    if key not in obj:
        raise SchemaError(f"{path}: missing required key '{key}' in object {obj}")
    return obj[key]


def _optional_float(obj: dict, key: str) -> Optional[float]:
    value = obj.get(key)
    return None if value is None else float(value)


def _load(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise SchemaError(f"{path}: failed to read/parse JSON: {e}") from e


def _load_array(path: str) -> list:
    data = _load(path)
    if not isinstance(data, list):
        raise SchemaError(f"{path}: expected a JSON array.")
    return data


def _load_object(path: str) -> dict:
    data = _load(path)
    if not isinstance(data, dict):
        raise SchemaError(f"{path}: expected a JSON object.")
    return data


def _subtopic(obj: dict, parent_id: str, path: str) -> EnhancedSubTopic:
    if not isinstance(obj, dict):
        raise SchemaError(f"{path}: subtopic must be an object.")
    return EnhancedSubTopic(
        id=str(_require(obj, "id", path)),
        title=str(_require(obj, "title", path)),
        content=str(obj.get("content", "")),
        confidence=float(obj.get("confidence", 0.5)),
        priority=obj.get("priority"),
        estimated_space=_optional_float(obj, "estimated_space"),
        is_selected=bool(obj.get("is_selected", False)),
        parent_topic_id=str(obj.get("parent_topic_id", parent_id)),
    )


def read_topics_json(path: str) -> List[OrganizedTopic]:
    """
    Load the topic pool from a JSON array. Each element must have:
      - id (str)
      - title (str)
    Everything else is optional (see module docstring).
    """
    data = _load_array(path)

    topics: List[OrganizedTopic] = []
    for idx, obj in enumerate(data, start=1):
        if not isinstance(obj, dict):
            raise SchemaError(f"{path}[{idx}]: expected an object.")
        try:
            tid = str(_require(obj, "id", path))
            topic = OrganizedTopic(
                id=tid,
                title=str(_require(obj, "title", path)),
                content=str(obj.get("content", "")),
                subtopics=tuple(_subtopic(s, tid, path) for s in obj.get("subtopics", [])),
                source_files=tuple(str(s) for s in obj.get("source_files", [])),
                confidence=float(obj.get("confidence", 0.5)),
                priority=obj.get("priority"),
                examples=tuple(
                    VisualExample(id=str(_require(e, "id", path)), context=str(e.get("context", "")))
                    for e in obj.get("examples", [])
                ),
                estimated_space=_optional_float(obj, "estimated_space"),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise SchemaError(f"{path}[{idx}]: {e}") from e
        topics.append(topic)
    return topics


def read_constraints_json(path: str) -> SpaceConstraints:
    """
    Load page constraints from a JSON object. Required keys:
      - available_pages (int)
      - page_size (str)
      - font_size (str)
      - columns (int)
    """
    obj = _load_object(path)
    try:
        return SpaceConstraints(
            available_pages=int(_require(obj, "available_pages", path)),
            page_size=str(_require(obj, "page_size", path)),
            font_size=str(_require(obj, "font_size", path)),
            columns=int(_require(obj, "columns", path)),
            target_utilization=float(obj.get("target_utilization", 0.85)),
        )
    except (TypeError, ValueError) as e:
        raise SchemaError(f"{path}: {e}") from e


def read_reference_json(path: str) -> ReferenceFormatAnalysis:
    """
    Load a reference-format analysis from a JSON object. Required keys:
      - content_density (number)
      - topic_count (int)
      - average_topic_length (number)
    """
    obj = _load_object(path)
    try:
        return ReferenceFormatAnalysis(
            content_density=float(_require(obj, "content_density", path)),
            topic_count=int(_require(obj, "topic_count", path)),
            average_topic_length=float(_require(obj, "average_topic_length", path)),
            layout_pattern=str(obj.get("layout_pattern", "single-column")),
            organization_style=str(obj.get("organization_style", "mixed")),
            visual_elements=dict(obj.get("visual_elements", {})),
        )
    except (TypeError, ValueError) as e:
        raise SchemaError(f"{path}: {e}") from e


def read_selection_json(path: str) -> List[TopicSelection]:
    """
    Load a caller-made selection from a JSON array. Each element must have:
      - topic_id (str)
    """
    data = _load_array(path)

    selection: List[TopicSelection] = []
    for idx, obj in enumerate(data, start=1):
        if not isinstance(obj, dict):
            raise SchemaError(f"{path}[{idx}]: expected an object.")
        try:
            selection.append(
                TopicSelection(
                    topic_id=str(_require(obj, "topic_id", path)),
                    subtopic_ids=tuple(str(s) for s in obj.get("subtopic_ids", [])),
                    priority=obj.get("priority"),
                    estimated_space=_optional_float(obj, "estimated_space"),
                )
            )
        except (TypeError, ValueError) as e:
            raise SchemaError(f"{path}[{idx}]: {e}") from e
    return selection
