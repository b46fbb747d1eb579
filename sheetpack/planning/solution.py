# -*- coding: utf-8 -*-
"""
Selection and result models for packing requests.

These data classes define the shape of outputs produced by the optimizer
and consumed by the renderer and the reporting layer. They are plain
records with no behavior beyond light validation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

from sheetpack.business_objects.constraints import SpaceConstraints
from sheetpack.business_objects.errors import StateValidationError
from sheetpack.business_objects.topics import PRIORITY_LEVELS, Priority

SuggestionType = Literal["add_topic", "add_subtopic", "expand_content", "reduce_content"]
ReductionType = Literal["remove_topics", "remove_subtopics", "trim_content"]
ContentImpact = Literal["minimal", "moderate", "significant"]
DensityActionType = Literal["increase_density", "decrease_density", "maintain_density"]
DensityTargetArea = Literal["topics", "subtopics", "spacing", "formatting", "content"]
ExpansionType = Literal["add_examples", "add_details", "add_subtopics", "add_context"]
RecommendationType = Literal["add_content", "expand_existing", "reduce_content", "redistribute"]


@dataclass(frozen=True)
class TopicSelection:
    """
    One selected topic and the subtopics chosen under it.

    Attributes
    ----------
    topic_id : str
    subtopic_ids : tuple[str, ...]
        Selected subtopic ids (set semantics; duplicates are dropped, first
        occurrence order kept).
    priority : Priority | None
    estimated_space : float | None
        Space charged for this selection; None counts as 0.
    """
    topic_id: str
    subtopic_ids: Tuple[str, ...] = field(default_factory=tuple)
    priority: Optional[Priority] = None
    estimated_space: Optional[float] = None

    def __post_init__(self) -> None:  # type: ignore[override]
        if not self.topic_id:
            raise StateValidationError("TopicSelection.topic_id must be non-empty.")
        if self.priority is not None and self.priority not in PRIORITY_LEVELS:
            raise StateValidationError(
                f"TopicSelection[{self.topic_id}] priority must be one of {PRIORITY_LEVELS}."
            )
        object.__setattr__(self, "subtopic_ids", tuple(dict.fromkeys(self.subtopic_ids)))


@dataclass(frozen=True)
class SubtopicSelection:
    """Subtopics recommended under one recommended topic."""
    topic_id: str
    subtopic_ids: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SpaceSuggestion:
    """
    Corrective action for the consumer to show or apply.

    space_impact is the signed change in used space if applied
    (positive = adds content, negative = frees space).
    """
    type: SuggestionType
    target_id: str
    description: str
    space_impact: float


@dataclass(frozen=True)
class SpaceOptimizationResult:
    """
    Outcome of tiered greedy packing.

    Attributes
    ----------
    recommended_topics : list[str]
        Topic ids in commit order (high tier first).
    recommended_subtopics : list[SubtopicSelection]
        One entry per recommended topic, same order.
    utilization_score : float
        used / available, clamped to [0, 1].
    suggestions : list[SpaceSuggestion]
    estimated_final_utilization : float
        Mirrors utilization_score.
    used_space, available_space : float
    """
    recommended_topics: List[str]
    recommended_subtopics: List[SubtopicSelection]
    utilization_score: float
    suggestions: List[SpaceSuggestion]
    estimated_final_utilization: float
    used_space: float = 0.0
    available_space: float = 0.0


@dataclass(frozen=True)
class SpaceUtilizationInfo:
    """
    Utilization of a given selection.

    utilization_percentage is a fraction (1.0 == full) and is not clamped:
    values above 1.0 signal overflow.
    """
    total_available_space: float
    used_space: float
    remaining_space: float
    utilization_percentage: float
    suggestions: List[SpaceSuggestion]


@dataclass(frozen=True)
class ReductionStrategy:
    """
    A candidate plan for resolving overflow.

    preservation_score in [0, 1] estimates how much educational value
    survives the removal (higher is better).
    """
    reduction_type: ReductionType
    target_ids: List[str]
    space_recovered: float
    content_impact: ContentImpact
    preservation_score: float


@dataclass(frozen=True)
class DensityAction:
    type: DensityActionType
    target_area: DensityTargetArea
    description: str
    impact: float


@dataclass(frozen=True)
class DensityOptimization:
    """
    Density alignment report.

    density_gap = target_density - current_density; positive means the
    selection is sparser than the target.
    """
    current_density: float
    target_density: float
    density_gap: float
    optimization_actions: List[DensityAction]
    reference_alignment: float


@dataclass(frozen=True)
class ContentExpansionSuggestion:
    topic_id: str
    expansion_type: ExpansionType
    suggested_content: str
    estimated_space: float
    relevance_score: float
    subtopic_id: Optional[str] = None


@dataclass(frozen=True)
class UtilizationRecommendation:
    type: RecommendationType
    priority: Priority
    description: str
    target_ids: List[str]
    expected_space_impact: float
    confidence_score: float
    implementation_steps: List[str]


@dataclass(frozen=True)
class ContentUtilizationAnalysis:
    utilization_percentage: float
    empty_space_detected: bool
    overflow_detected: bool
    recommendations: List[UtilizationRecommendation]
    density_optimization: DensityOptimization


@dataclass(frozen=True)
class SelectionValidation:
    """Fit check for a caller-made selection; is_valid iff utilization <= 1.0."""
    is_valid: bool
    total_space: float
    used_space: float
    utilization_percentage: float
    warnings: List[str]
    suggestions: List[str]


@dataclass(frozen=True)
class SpaceRecommendations:
    optimal_topic_count: int
    suggested_configuration: SpaceConstraints
    space_utilization_tips: List[str]
