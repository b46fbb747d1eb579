# -*- coding: utf-8 -*-
"""
Topic models for space-aware packing.

A topic pool arrives read-only from the topic source. Records here are
immutable; derived values (estimated_space, inferred priority, selection
flags) are filled in by returning new records via dataclasses.replace.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

from .errors import StateValidationError

Priority = Literal["high", "medium", "low"]

PRIORITY_LEVELS: Tuple[str, ...] = ("high", "medium", "low")
DEFAULT_PRIORITY: str = "medium"


def _check_priority(owner: str, priority: Optional[str]) -> None:
    if priority is not None and priority not in PRIORITY_LEVELS:
        raise StateValidationError(
            f"{owner} priority must be one of {PRIORITY_LEVELS}, got {priority!r}."
        )


def _check_confidence(owner: str, confidence: float) -> None:
    if not 0.0 <= float(confidence) <= 1.0:
        raise StateValidationError(f"{owner} confidence must be in [0, 1].")


def _check_space(owner: str, space: Optional[float]) -> None:
    if space is not None and space < 0:
        raise StateValidationError(f"{owner} estimated_space must be >= 0.")


def priority_of(obj) -> str:
    """Effective priority of a topic/subtopic/selection; missing means 'medium'."""
    p = getattr(obj, "priority", None)
    return p if p in PRIORITY_LEVELS else DEFAULT_PRIORITY


def space_of(obj) -> float:
    """Effective estimated space; missing (None) means 0."""
    s = getattr(obj, "estimated_space", None)
    return 0.0 if s is None else float(s)


@dataclass(frozen=True)
class VisualExample:
    """
    A diagram/image attached to a topic. Only its count matters for packing.

    Attributes
    ----------
    id : str
        Unique identifier.
    context : str
        Caption or surrounding text (cosmetic).
    is_example : bool
        True when the image illustrates a worked example.
    """
    id: str
    context: str = ""
    is_example: bool = True

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.id:
            raise StateValidationError("VisualExample.id must be non-empty.")


@dataclass(frozen=True)
class EnhancedSubTopic:
    """
    A selectable subtopic owned by exactly one OrganizedTopic.

    Attributes
    ----------
    id : str
        Unique identifier.
    title, content : str
        Heading and body text.
    confidence : float
        Extraction confidence in [0, 1].
    priority : Priority | None
        Educational importance tier; None until inferred.
    estimated_space : float | None
        Footprint in content units; None until estimated.
    is_selected : bool
        Selection flag, changed only through apply_optimization or the caller.
    parent_topic_id : str
        Back-reference to the owning topic (not an ownership pointer).
    """
    id: str
    title: str
    content: str = ""
    confidence: float = 0.5
    priority: Optional[Priority] = None
    estimated_space: Optional[float] = None
    is_selected: bool = False
    parent_topic_id: str = ""

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.id:
            raise StateValidationError("EnhancedSubTopic.id must be non-empty.")
        _check_confidence(f"EnhancedSubTopic[{self.id}]", self.confidence)
        _check_priority(f"EnhancedSubTopic[{self.id}]", self.priority)
        _check_space(f"EnhancedSubTopic[{self.id}]", self.estimated_space)


@dataclass(frozen=True)
class OrganizedTopic:
    """
    A candidate topic with its ordered subtopics.

    Attributes
    ----------
    id : str
        Unique identifier.
    title, content : str
        Heading and body text.
    subtopics : tuple[EnhancedSubTopic, ...]
        Owned subtopics in display order.
    source_files : tuple[str, ...]
        Documents the topic was extracted from.
    confidence : float
        Extraction confidence in [0, 1].
    priority : Priority | None
        Educational importance tier; None until inferred.
    examples : tuple[VisualExample, ...]
        Attached images; each adds a fixed surcharge to the footprint.
    estimated_space : float | None
        Total footprint (body + title + subtopics + examples); None until estimated.
    """
    id: str
    title: str
    content: str = ""
    subtopics: Tuple[EnhancedSubTopic, ...] = field(default_factory=tuple)
    source_files: Tuple[str, ...] = field(default_factory=tuple)
    confidence: float = 0.5
    priority: Optional[Priority] = None
    examples: Tuple[VisualExample, ...] = field(default_factory=tuple)
    estimated_space: Optional[float] = None

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.id:
            raise StateValidationError("OrganizedTopic.id must be non-empty.")
        owner = f"OrganizedTopic[{self.id}]"
        _check_confidence(owner, self.confidence)
        _check_priority(owner, self.priority)
        _check_space(owner, self.estimated_space)

        # Lists are accepted for convenience; stored as tuples.
        object.__setattr__(self, "subtopics", tuple(self.subtopics))
        object.__setattr__(self, "source_files", tuple(self.source_files))
        object.__setattr__(self, "examples", tuple(self.examples))

        seen: set[str] = set()
        for sub in self.subtopics:
            if sub.id in seen:
                raise StateValidationError(f"{owner} duplicate subtopic id: {sub.id}")
            seen.add(sub.id)
            if sub.parent_topic_id and sub.parent_topic_id != self.id:
                raise StateValidationError(
                    f"{owner} subtopic {sub.id} points at parent {sub.parent_topic_id!r}."
                )

    def subtopic(self, subtopic_id: str) -> Optional[EnhancedSubTopic]:
        for sub in self.subtopics:
            if sub.id == subtopic_id:
                return sub
        return None
